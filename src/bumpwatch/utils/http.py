"""Async HTTP client with optional retries on connection failures."""

import asyncio
from typing import Any

import httpx

from bumpwatch.utils.logging import get_logger

logger = get_logger(__name__)


class AsyncHttpClient:
    """Async HTTP client used for existence checks against forge URLs.

    Features:
    - Configurable timeout
    - Redirects followed, final status returned as-is
    - Optional retries with backoff on connection errors and read timeouts
    """

    DEFAULT_TIMEOUT = 30.0
    DEFAULT_RETRIES = 0
    RETRY_DELAYS = [1.0, 2.0, 4.0]

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_RETRIES,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            timeout: Request timeout in seconds.
            max_retries: Maximum number of retries for connection errors.
            headers: Default headers for all requests.
            transport: Optional transport, e.g. ``httpx.MockTransport`` in tests.
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.default_headers = headers or {}
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AsyncHttpClient":
        """Enter async context."""
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers=self.default_headers,
            follow_redirects=True,
            transport=self.transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the underlying httpx client."""
        if self._client is None:
            raise RuntimeError("Client not initialized. Use async with statement.")
        return self._client

    async def _request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make an HTTP request, retrying connection failures.

        Non-2xx statuses are returned, not raised.

        Args:
            method: HTTP method.
            url: Request URL.
            **kwargs: Additional arguments for httpx.

        Returns:
            HTTP response.

        Raises:
            httpx.HTTPError: If the request fails after all retries.
        """
        for attempt in range(self.max_retries + 1):
            try:
                return await self.client.request(method, url, **kwargs)
            except (httpx.ConnectError, httpx.ReadTimeout) as e:
                if attempt >= self.max_retries:
                    raise
                delay = self.RETRY_DELAYS[min(attempt, len(self.RETRY_DELAYS) - 1)]
                logger.warning(
                    "Connection error, retrying in %.1f seconds: %s",
                    delay,
                    str(e),
                )
                await asyncio.sleep(delay)

        raise RuntimeError("Unexpected retry loop exit")

    async def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make a GET request.

        Args:
            url: Request URL.
            headers: Additional headers.

        Returns:
            HTTP response.
        """
        return await self._request("GET", url, headers=headers)

    async def status(self, url: str) -> int:
        """Return the final status code of a GET request to ``url``."""
        response = await self.get(url)
        return response.status_code
