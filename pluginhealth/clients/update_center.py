"""Update-center catalog client."""

import logging

import httpx
from pydantic import ValidationError

from pluginhealth.clients.http_client import BaseHttpClient
from pluginhealth.clients.rate_limiter import RateLimiter
from pluginhealth.consts import DOCUMENTATION_URLS_URL, UPDATE_CENTER_URL
from pluginhealth.models.model_update_center import UpdateCenter

logger = logging.getLogger(__name__)


class UpdateCenterError(Exception):
    """Raised when the update-center snapshot cannot be fetched or parsed."""


class UpdateCenterClient(BaseHttpClient):
    """Fetches the update-center snapshot and the documentation index."""

    def __init__(
        self,
        update_center_url: str = UPDATE_CENTER_URL,
        documentation_urls_url: str = DOCUMENTATION_URLS_URL,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(rate_limiter=rate_limiter, transport=transport)
        self.update_center_url = update_center_url
        self.documentation_urls_url = documentation_urls_url

    async def fetch_update_center(self) -> UpdateCenter:
        """Fetch and parse the update-center snapshot.

        Returns:
            Parsed UpdateCenter

        Raises:
            UpdateCenterError: If the snapshot cannot be downloaded or parsed
        """
        logger.info(f"Fetching update-center from {self.update_center_url}")
        try:
            data = await self._get_json(self.update_center_url)
            update_center = UpdateCenter.model_validate(data)
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            raise UpdateCenterError(f"Could not read update-center: {e}") from e

        logger.info(
            f"Update-center: {len(update_center.plugins)} plugins, "
            f"{len(update_center.deprecations)} deprecations, "
            f"{len(update_center.warnings)} warnings"
        )
        return update_center

    async def fetch_documentation_urls(self) -> dict[str, str]:
        """Fetch the plugin documentation index.

        Failures are logged and yield an empty mapping, which probes
        depending on it report as an error.

        Returns:
            Mapping of plugin name to documentation URL
        """
        try:
            data = await self._get_json(self.documentation_urls_url)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Could not fetch documentation URLs: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning("Documentation URLs payload is not a JSON object")
            return {}

        links: dict[str, str] = {}
        for name, entry in data.items():
            url = entry.get("url") if isinstance(entry, dict) else None
            if url:
                links[name] = url
        logger.info(f"Loaded {len(links)} documentation URLs")
        return links
