"""
Generic async HTTP client wrapper using aiohttp.
Provides bounded retry of network failures; HTTP error statuses are never retried.
"""

import asyncio
from typing import Optional, Dict, Any
import aiohttp
import logging

logger = logging.getLogger(__name__)


class HttpStatusError(Exception):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, status: int, payload: Any = None):
        self.status = status
        self.payload = payload
        super().__init__(f"HTTP {status}")


class HttpClient:
    """
    Async HTTP client wrapper using aiohttp.
    Provides get/post/put/delete methods returning decoded JSON bodies.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 1,
        retry_delay: float = 1.0,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Optional base URL for all requests
            timeout: Total request timeout in seconds
            max_retries: Maximum number of attempts for network failures
            retry_delay: Initial delay between retries in seconds
            headers: Headers sent with every request
        """
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.headers = dict(headers or {})
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def _build_url(self, endpoint: str) -> str:
        """Build full URL from endpoint."""
        if self.base_url:
            return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        return endpoint

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        """Decode a JSON body, tolerating empty or non-JSON responses."""
        if response.status == 204:
            return None
        try:
            return await response.json(content_type=None)
        except ValueError:
            return await response.text()

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> Any:
        """
        Make HTTP request with retry logic for network failures.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional arguments for aiohttp request

        Returns:
            Decoded response body

        Raises:
            HttpStatusError: the server answered with status >= 400
            aiohttp.ClientError / asyncio.TimeoutError: after the last attempt
        """
        session = await self._get_session()
        last_exception: Optional[BaseException] = None

        for attempt in range(self.max_retries):
            try:
                async with session.request(method, url, **kwargs) as response:
                    body = await self._read_body(response)
                    if response.status >= 400:
                        raise HttpStatusError(response.status, body)
                    return body
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e
                if attempt < self.max_retries - 1:
                    delay = self.retry_delay * (2 ** attempt)  # Exponential backoff
                    logger.warning(
                        f"Request failed (attempt {attempt + 1}/{self.max_retries}): {e!r}. Retrying in {delay}s..."
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.error(f"{method} {url} failed after {self.max_retries} attempt(s): {e!r}")

        raise last_exception

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make GET request and return the decoded JSON body."""
        url = self._build_url(endpoint)
        return await self._request_with_retry("GET", url, params=params, headers=headers)

    async def post(
        self,
        endpoint: str,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make POST request and return the decoded JSON body."""
        url = self._build_url(endpoint)
        return await self._request_with_retry("POST", url, json=json, headers=headers)

    async def put(
        self,
        endpoint: str,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make PUT request and return the decoded JSON body."""
        url = self._build_url(endpoint)
        return await self._request_with_retry("PUT", url, json=json, headers=headers)

    async def delete(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make DELETE request and return the decoded JSON body (None for 204)."""
        url = self._build_url(endpoint)
        return await self._request_with_retry("DELETE", url, headers=headers)
