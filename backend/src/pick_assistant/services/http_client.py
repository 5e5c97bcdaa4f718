"""Shared httpx plumbing for external data providers."""

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

import httpx

from pick_assistant.errors import DataUnavailableError, ProviderError, TransientProviderError
from pick_assistant.models.provider import ProviderResult
from pick_assistant.services.retry import retry_with_backoff

logger = logging.getLogger(__name__)


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Seconds to wait from a Retry-After header (delta-seconds or HTTP-date).

    Unparsable values give None; dates in the past give 0.
    """
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring unparsable Retry-After: {value!r}")
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


class ProviderHttpClient:
    """Async GET client that classifies responses and retries transient failures.

    404 -> NOT_FOUND, 429/5xx/network -> retried, other 4xx -> ERROR.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_base_delay: float = 2.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.retry_attempts = retry_attempts
        self.retry_base_delay = retry_base_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(
        self,
        url: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> ProviderResult[Any]:
        """Issue one GET. Raises TransientProviderError for retryable failures."""
        client = await self._get_client()
        try:
            response = await client.get(url, params=params, headers=headers)
        except httpx.TransportError as e:
            raise TransientProviderError(f"Network error for {url}: {e}") from e

        status = response.status_code
        if status == 404:
            return ProviderResult.not_found()
        if status == 429:
            raise TransientProviderError(
                "Rate limit exceeded",
                status_code=429,
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
            )
        if status >= 500:
            raise TransientProviderError(f"Provider error {status} for {url}", status_code=status)
        if status >= 400:
            raise DataUnavailableError(f"Provider rejected {url} with {status}", status_code=status)

        try:
            return ProviderResult.found(response.json())
        except ValueError as e:
            raise DataUnavailableError(f"Malformed JSON from {url}", status_code=status, last_error=e) from e

    async def _fetch(self, url: str, params: Optional[dict] = None, **kwargs) -> ProviderResult[Any]:
        """_request with retries; provider failures become an ERROR result."""
        try:
            return await retry_with_backoff(
                lambda: self._request(url, params=params, **kwargs),
                max_attempts=self.retry_attempts,
                base_delay=self.retry_base_delay,
            )
        except ProviderError as e:
            logger.warning(f"Request failed for {url}: {e}")
            return ProviderResult.failed(e)
