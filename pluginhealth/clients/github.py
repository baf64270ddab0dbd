"""GitHub REST API client."""

import logging
from typing import Any

import httpx

from pluginhealth.clients.http_client import BaseHttpClient
from pluginhealth.clients.rate_limiter import RateLimiter
from pluginhealth.consts import GITHUB_API_URL, GITHUB_TOKEN

logger = logging.getLogger(__name__)


class GitHubClient(BaseHttpClient):
    """Minimal GitHub client used to validate plugin repositories."""

    def __init__(
        self,
        token: str | None = GITHUB_TOKEN,
        base_url: str = GITHUB_API_URL,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        super().__init__(
            base_url=base_url,
            headers=headers,
            rate_limiter=rate_limiter,
            transport=transport,
        )

    async def get_repository(self, full_name: str) -> dict[str, Any] | None:
        """Fetch a repository by its owner/name.

        Args:
            full_name: Repository identifier, e.g. "jenkinsci/mailer-plugin"

        Returns:
            Repository payload, or None when the repository does not exist

        Raises:
            httpx.HTTPError: On other HTTP or network failures
        """
        try:
            return await self._get_json(f"/repos/{full_name}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.debug(f"Repository {full_name} not found on GitHub")
                return None
            raise
