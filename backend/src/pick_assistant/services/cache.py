"""In-memory TTL cache shared by every component.

Keys are namespaced by the caller ("stats:sampled:157:mid",
"matchup:157:238:mid", ...). Values are only ever replaced wholesale, so a
concurrent get-then-set at worst repeats a fetch.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    created_at: float
    expires_at: float


class TTLCache:
    """Keyed store with per-entry expiry and a periodic background sweep."""

    def __init__(
        self,
        sweep_interval: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._entries: dict[str, CacheEntry[Any]] = {}
        self._sweeper: Optional[asyncio.Task] = None

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Store value under key for ttl seconds, replacing any prior entry."""
        now = self._clock()
        self._entries[key] = CacheEntry(value=value, created_at=now, expires_at=now + ttl)
        logger.debug(f"Cache set: {key} (TTL: {ttl}s)")

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"Cache miss: {key}")
            return None

        if self._clock() > entry.expires_at:
            self._entries.pop(key, None)
            logger.debug(f"Cache expired: {key}")
            return None

        logger.debug(f"Cache hit: {key}")
        return entry.value

    def has(self, key: str) -> bool:
        """Check if key exists and is not expired."""
        entry = self._entries.get(key)
        if entry is None:
            return False
        if self._clock() > entry.expires_at:
            self._entries.pop(key, None)
            return False
        return True

    def delete(self, key: str) -> bool:
        deleted = self._entries.pop(key, None) is not None
        if deleted:
            logger.debug(f"Cache deleted: {key}")
        return deleted

    def clear(self) -> None:
        self._entries.clear()
        logger.info("Cache cleared")

    def stats(self) -> dict:
        """Size and keys, for diagnostics."""
        return {"size": len(self._entries), "keys": list(self._entries.keys())}

    def sweep(self) -> int:
        """Remove every expired entry. Returns the number removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            self._entries.pop(key, None)
        if expired:
            logger.debug(f"Cache cleanup: removed {len(expired)} expired entries")
        return len(expired)

    def start(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever())

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            self.sweep()

    @property
    def running(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def destroy(self) -> None:
        """Stop the sweep and drop all entries. Safe to call repeatedly."""
        if self._sweeper is not None:
            self._sweeper.cancel()
            self._sweeper = None
        self._entries.clear()
