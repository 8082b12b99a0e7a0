"""In-memory schedule resolution cache."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from mbus_departures.domain.contracts.schedule_cache import ScheduleCacheProtocol
from mbus_departures.domain.models.cache_entry import CacheEntry
from mbus_departures.domain.models.stop_route_pair import StopRoutePair

if TYPE_CHECKING:
    from mbus_departures.domain.models.schedule_resolution import ScheduleResolution

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60.0


class InMemoryScheduleCache(ScheduleCacheProtocol):
    """Process-wide cache of resolutions, one entry per stop/route pair.

    Entries are stored under the pair itself; the "<stop>-<route>" label is
    only used for display. An entry is served only while it is younger than
    the TTL and its source URL still has the shape of the current upstream
    generation. Entries failing either check are evicted on read. Updates of
    one pair are serialized with a per-pair asyncio.Lock that lives exactly
    as long as the entry.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        is_current_source_url: Callable[[str], bool] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Maximum age at which an entry may be served.
            is_current_source_url: Predicate for the current source URL shape.
                Every URL is accepted if omitted.
            clock: Monotonic clock in seconds.
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl_seconds = ttl_seconds
        self._is_current_source_url = is_current_source_url or (lambda _url: True)
        self._clock = clock
        self._entries: dict[StopRoutePair, CacheEntry] = {}
        self._locks: dict[StopRoutePair, asyncio.Lock] = {}

    def _lock_for(self, pair: StopRoutePair) -> asyncio.Lock:
        lock = self._locks.get(pair)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[pair] = lock
        return lock

    def _evict(self, pair: StopRoutePair) -> CacheEntry | None:
        self._locks.pop(pair, None)
        return self._entries.pop(pair, None)

    def _is_usable(self, entry: CacheEntry) -> bool:
        if not self._is_current_source_url(entry.payload.source_url):
            logger.info(
                f"Evicting cache entry {entry.key}: stale source URL {entry.payload.source_url}"
            )
            return False
        if entry.age_seconds(self._clock()) >= self._ttl_seconds:
            logger.debug(f"Evicting expired cache entry {entry.key}")
            return False
        return True

    async def get(self, stop_id: str, route: str) -> CacheEntry | None:
        """Get a usable entry, evicting it if it expired or its URL shape is stale."""
        pair = StopRoutePair(stop_id, route)
        if pair not in self._entries:
            return None
        async with self._lock_for(pair):
            entry = self._entries.get(pair)
            if entry is None:
                return None
            if not self._is_usable(entry):
                self._evict(pair)
                return None
            return entry

    async def put(self, stop_id: str, route: str, resolution: ScheduleResolution) -> None:
        """Store a resolution, unconditionally replacing the previous entry."""
        pair = StopRoutePair(stop_id, route)
        async with self._lock_for(pair):
            self._entries[pair] = CacheEntry(
                key=pair.cache_key, timestamp=self._clock(), payload=resolution
            )

    async def invalidate(self, stop_id: str, route: str) -> None:
        """Evict the entry of a stop and route, if any."""
        pair = StopRoutePair(stop_id, route)
        if pair not in self._entries:
            return
        async with self._lock_for(pair):
            if self._evict(pair) is not None:
                logger.debug(f"Invalidated cache entry {pair.cache_key}")

    async def clear(self) -> None:
        """Evict every entry."""
        for pair in list(self._entries):
            async with self._lock_for(pair):
                self._evict(pair)

    def keys(self) -> set[str]:
        """Labels of the entries currently stored, usable or not."""
        return {pair.cache_key for pair in self._entries}

    def lock_count(self) -> int:
        """Number of per-pair locks currently held by the cache."""
        return len(self._locks)
