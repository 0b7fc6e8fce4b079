"""
Async HTTP client used to fetch player scripts.

Transient network errors and 429/5xx gateway responses are retried with
capped exponential back-off; other 4xx responses are returned at once.

The resolution core never retries on its own; whoever constructs the
client chooses the policy (max_retries=0 disables it).
"""

import asyncio
import logging
import random

import httpx

from ..config import get_settings

logger = logging.getLogger(__name__)

# Maximum back-off wait time (seconds) between retries
_MAX_BACKOFF = 30.0

# HTTP status codes that trigger an automatic retry
_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

# All httpx exception types that represent transient network problems
_NETWORK_ERRORS = (
    httpx.TimeoutException,  # base for all timeout variants
    httpx.ConnectError,
    httpx.ReadError,
    httpx.WriteError,
    httpx.PoolTimeout,
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.CloseError,
)


class HTTPClient:
    """Async HTTP client with retry logic. Wraps httpx.AsyncClient."""

    def __init__(
        self,
        timeout: int | None = None,
        max_retries: int | None = None,
        headers: dict[str, str] | None = None,
    ):
        settings = get_settings()
        self._timeout = timeout or settings.request_timeout
        self._max_retries = settings.max_retries if max_retries is None else max_retries

        default_headers = {
            "User-Agent": settings.user_agent,
            "Accept": "*/*",
            "Accept-Language": "en-US,en;q=0.5",
            "Origin": settings.base_url,
            "Referer": f"{settings.base_url}/",
        }
        if headers:
            default_headers.update(headers)

        self._default_headers = default_headers
        self._client: httpx.AsyncClient | None = None

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(
                    self._timeout,
                    connect=10.0,
                    read=self._timeout,
                    write=10.0,
                    pool=10.0,
                ),
                follow_redirects=True,
                headers=self._default_headers,
                http2=True,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Core request with retry
    # ------------------------------------------------------------------

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Send a request, retrying transient failures up to max_retries times.

        A retryable status on the last attempt is returned as-is; a network
        error on the last attempt is raised.
        """
        client = await self._get_client()
        attempts = self._max_retries + 1

        for attempt in range(attempts):
            try:
                response = await client.request(method, url, **kwargs)
            except _NETWORK_ERRORS as exc:
                if attempt + 1 == attempts:
                    logger.error(f"{type(exc).__name__} fetching {url}, giving up after {attempts} attempts")
                    raise
                wait = self._backoff(attempt)
                reason = type(exc).__name__
            else:
                if response.status_code not in _RETRYABLE_STATUS_CODES or attempt + 1 == attempts:
                    return response
                wait = self._backoff(attempt, response)
                reason = f"HTTP {response.status_code}"

            logger.warning(f"{reason} fetching {url} (attempt {attempt + 1}/{attempts}), retrying in {wait:.1f}s")
            await asyncio.sleep(wait)

        raise httpx.ReadError("All retries exhausted with no response")

    @staticmethod
    def _backoff(attempt: int, response: httpx.Response | None = None) -> float:
        """Exponential back-off with jitter, capped; a 429's Retry-After seconds act as a floor."""
        wait = min((2**attempt) + random.uniform(0, 1), _MAX_BACKOFF)
        if response is not None and response.status_code == 429:
            retry_after = response.headers.get("Retry-After", "")
            if retry_after.isdigit():
                wait = max(wait, min(float(retry_after), _MAX_BACKOFF))
        return wait

    # ------------------------------------------------------------------
    # Convenience methods
    # ------------------------------------------------------------------

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def get_text(self, url: str, **kwargs) -> str:
        """GET request returning response text."""
        response = await self.get(url, **kwargs)
        response.raise_for_status()
        return response.text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()
