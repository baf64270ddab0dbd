"""Shared async HTTP plumbing for the catalog and GitHub clients."""

import asyncio
import logging
from typing import Any

import httpx

from pluginhealth.clients.rate_limiter import RateLimiter, parse_retry_after
from pluginhealth.consts import HTTP_MAX_RETRIES, HTTP_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


class BaseHttpClient:
    """Async JSON client with retry on rate limits and server errors.

    Resilience features:
    - Exponential backoff with jitter on 429 and 5xx responses
    - Retry-After header honoured when longer than the backoff
    - Bounded number of attempts (max_retries)
    """

    def __init__(
        self,
        base_url: str = "",
        headers: dict[str, str] | None = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        max_retries: int = HTTP_MAX_RETRIES,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Base URL prepended to relative request paths
            headers: Default headers sent with every request
            timeout: Request timeout in seconds
            max_retries: Maximum retries on retryable responses
            rate_limiter: Backoff policy (default: RateLimiter())
            transport: Optional httpx transport, used by tests to mock responses
        """
        self.base_url = base_url
        self.headers = {"Accept": "application/json", **(headers or {})}
        self.timeout = timeout
        self.max_retries = max_retries
        self._rate_limiter = rate_limiter or RateLimiter()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers=self.headers,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def _request(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """GET a resource, retrying on rate limits and server errors.

        Args:
            url: Absolute URL or path relative to base_url
            params: Query parameters

        Returns:
            The successful response

        Raises:
            httpx.HTTPStatusError: On non-retryable errors or when retries are exhausted
            httpx.TransportError: On network failures after retries are exhausted
        """
        client = await self._get_client()
        attempt = 0

        while True:
            try:
                response = await client.get(url, params=params)
            except httpx.TransportError as e:
                if attempt >= self.max_retries:
                    raise
                attempt += 1
                delay = self._rate_limiter.backoff()
                logger.warning(f"Network error on {url} ({e}), retrying in {delay:.1f}s")
                await asyncio.sleep(delay)
                continue

            if response.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                attempt += 1
                delay = self._rate_limiter.backoff(
                    parse_retry_after(response.headers.get("Retry-After"))
                )
                logger.warning(
                    f"HTTP {response.status_code} on {url}, retrying in {delay:.1f}s "
                    f"(attempt {attempt}/{self.max_retries})"
                )
                await asyncio.sleep(delay)
                continue

            response.raise_for_status()
            self._rate_limiter.reset()
            return response

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._request(url, params=params)
        return response.json()

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
