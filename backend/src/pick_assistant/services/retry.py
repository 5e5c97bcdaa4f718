"""Exponential backoff for transient provider failures."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from pick_assistant.errors import DataUnavailableError, TransientProviderError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 2.0,
) -> T:
    """Run operation, retrying TransientProviderError with exponential backoff.

    Waits base_delay * 2**(attempt-1) between attempts, or the provider's
    Retry-After if that is longer. Other exceptions propagate immediately.

    Raises:
        DataUnavailableError: after max_attempts transient failures, chained
            to the last error.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    last_error: Optional[TransientProviderError] = None
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except TransientProviderError as e:
            last_error = e
            if attempt == max_attempts:
                break
            delay = base_delay * (2 ** (attempt - 1))
            if e.retry_after:
                delay = max(delay, e.retry_after)
            logger.debug(f"Retry attempt {attempt}/{max_attempts} after {delay:.2f}s: {e}")
            await asyncio.sleep(delay)

    logger.warning(f"Giving up after {max_attempts} attempts: {last_error}")
    raise DataUnavailableError(
        f"Provider unavailable after {max_attempts} attempts: {last_error}",
        status_code=last_error.status_code,
        last_error=last_error,
    ) from last_error
