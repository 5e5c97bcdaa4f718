"""Sliding-window rate limiter for outbound provider calls."""

import asyncio
import logging
import time
from collections import deque
from typing import Callable

logger = logging.getLogger(__name__)

# Added to the computed wait so a coarse timer does not wake us a hair early
SAFETY_MARGIN = 0.01


class RateLimiter:
    """Admit at most `max_requests` calls in any trailing `window` seconds.

    Safe to share between concurrent tasks: the timestamp deque is only
    touched while holding an asyncio.Lock. Waiting happens outside the lock,
    and every waiter re-checks after waking.
    """

    def __init__(
        self,
        max_requests: int,
        window: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests <= 0 or window <= 0:
            raise ValueError("max_requests and window must be positive")
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._timestamps: deque[float] = deque()
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.window:
            self._timestamps.popleft()

    async def acquire(self) -> None:
        """Wait for a free slot, then record this call."""
        while True:
            async with self._lock:
                now = self._clock()
                self._prune(now)
                if len(self._timestamps) < self.max_requests:
                    self._timestamps.append(now)
                    return
                wait = self.window - (now - self._timestamps[0]) + SAFETY_MARGIN

            logger.debug(f"Rate limit reached ({self.max_requests}/{self.window}s), waiting {wait:.3f}s")
            await asyncio.sleep(max(wait, 0.0))

    def queue_size(self) -> int:
        """Number of calls recorded inside the current window."""
        self._prune(self._clock())
        return len(self._timestamps)

    def reset(self) -> None:
        self._timestamps.clear()
