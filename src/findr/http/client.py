"""Async HTTP client used by the hosted store, object storage and classifier.

Wraps ``httpx.AsyncClient`` with:
- Base URL and default headers (API keys live here)
- Optional bounded retries with exponential backoff on 5xx and timeouts
- A uniform error type so callers never see httpx exceptions

Example:
    >>> from findr.http import HttpClient
    >>>
    >>> async with HttpClient("https://abc.supabase.co", headers={"apikey": "anon"}) as client:
    ...     rows = await client.get_json("/rest/v1/users", params={"select": "*"})
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = (500, 502, 503, 504)


class HttpClientError(Exception):
    """Base exception for HTTP client errors."""


class HttpStatusError(HttpClientError):
    """Server answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body[:200]}")


class HttpClient:
    """Async HTTP client with uniform errors and optional retries.

    Example:
        >>> client = HttpClient("https://example.com", timeout=5.0)
        >>> client.timeout
        5.0
        >>> client.max_retries
        0

    Attributes:
        base_url: Prefix for relative request URLs
        timeout: Default request timeout in seconds
        max_retries: Extra attempts after the first one (0 = never retry)
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        timeout: float = 30.0,
        max_retries: int = 0,
        headers: dict[str, str] | None = None,
        user_agent: str = "Findr/1.0",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize HTTP client.

        Args:
            base_url: Base URL for relative requests
            timeout: Default request timeout
            max_retries: Retry attempts on server errors and timeouts
            headers: Additional default headers
            user_agent: User-Agent header
            transport: Custom httpx transport (tests use ``httpx.MockTransport``)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_retries = max_retries
        self._user_agent = user_agent
        self._extra_headers = headers or {}
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        """Default request timeout in seconds."""
        return self._timeout

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def headers(self) -> dict[str, str]:
        """Default headers for requests."""
        return {
            "User-Agent": self._user_agent,
            "Accept": "application/json",
            **self._extra_headers,
        }

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self.headers,
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying connection pool."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> HttpClient:
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        url: str,
        *,
        retry: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a request, retrying transient failures if configured.

        Args:
            method: HTTP method
            url: URL (relative to base_url or absolute)
            retry: Set False to make exactly one attempt
            **kwargs: Additional arguments for httpx

        Returns:
            HTTP response with a 2xx status

        Raises:
            HttpStatusError: Non-2xx response
            HttpClientError: Timeout or transport failure
        """
        client = self._ensure_client()
        max_retries = self._max_retries if retry else 0

        for attempt in range(max_retries + 1):
            try:
                response = await client.request(method, url, **kwargs)
            except httpx.TimeoutException as e:
                if attempt < max_retries:
                    await asyncio.sleep(2**attempt)
                    continue
                raise HttpClientError(f"Request timeout: {e}") from e
            except httpx.RequestError as e:
                if attempt < max_retries:
                    await asyncio.sleep(2**attempt)
                    continue
                raise HttpClientError(f"Request failed: {e}") from e

            if response.is_success:
                return response

            if response.status_code in RETRYABLE_STATUS and attempt < max_retries:
                logger.debug("%s %s -> %s, retrying", method, url, response.status_code)
                await asyncio.sleep(2**attempt)
                continue
            raise HttpStatusError(response.status_code, response.text)

        raise HttpClientError(f"Max retries exceeded for {method} {url}")

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """GET and decode a JSON body."""
        response = await self.get(url, **kwargs)
        return response.json()

    async def get_bytes(self, url: str, **kwargs: Any) -> bytes:
        """GET a binary body."""
        response = await self.get(url, **kwargs)
        return response.content


__all__ = [
    "HttpClient",
    "HttpClientError",
    "HttpStatusError",
]
