# price_checker/storage/comparison_cache.py

"""In-memory TTL cache of comparison results keyed by product identity."""

import asyncio
import logging
import threading
import time
from dataclasses import dataclass

from price_checker.config.settings import Settings
from price_checker.models.comparison import ComparisonResult

logger = logging.getLogger("price_checker.cache")


@dataclass
class CacheEntry:
    """A stored comparison result and the time it was computed."""

    key: str
    value: ComparisonResult
    timestamp: float


class ComparisonCache:
    """TTL-bounded mapping from identity key to comparison result.

    Expiry is lazy: :meth:`get` treats a stale entry as a miss but leaves
    it in place.  Stale entries are physically removed by :meth:`sweep`,
    which the background sweeper runs every ``sweep_interval`` seconds.
    Currency is part of every key, so a change of target currency simply
    clears the whole cache.
    """

    def __init__(
        self,
        ttl: float | None = None,
        sweep_interval: float | None = None,
    ) -> None:
        self._ttl: float = (
            Settings.COMPARISON_CACHE_TTL if ttl is None else ttl
        )
        self._sweep_interval: float = (
            Settings.CACHE_SWEEP_INTERVAL
            if sweep_interval is None
            else sweep_interval
        )
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._sweeper: asyncio.Task[None] | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """Physical presence, regardless of freshness."""
        return key in self._entries

    def get(self, key: str) -> ComparisonResult | None:
        """Return the cached result if it is still within the TTL."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        if time.time() - entry.timestamp < self._ttl:
            logger.debug("Cache hit for '%s'", key)
            return entry.value
        logger.debug("Cache entry for '%s' expired", key)
        return None

    def set(self, key: str, value: ComparisonResult) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(
                key=key, value=value, timestamp=time.time()
            )
        logger.info(
            "Cached %d prices for '%s'", len(value.all_prices), key
        )

    def clear(self) -> int:
        """Purge all entries and return how many were removed."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Cache cleared (%d entries removed)", count)
        return count

    def sweep(self) -> int:
        """Remove entries older than the TTL and return the count."""
        now = time.time()
        with self._lock:
            expired = [
                key
                for key, entry in self._entries.items()
                if now - entry.timestamp >= self._ttl
            ]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info("Swept %d expired cache entries", len(expired))
        return len(expired)

    async def _run_sweeper(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.sweep()

    def start_sweeper(self) -> asyncio.Task[None]:
        """Schedule the periodic sweep on the running event loop."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._run_sweeper())
            logger.debug(
                "Cache sweeper started (interval=%.0fs)",
                self._sweep_interval,
            )
        return self._sweeper

    async def stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
        logger.debug("Cache sweeper stopped")
