"""Protocol for schedule resolution caching."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from mbus_departures.domain.models.cache_entry import CacheEntry
    from mbus_departures.domain.models.schedule_resolution import ScheduleResolution


class ScheduleCacheProtocol(Protocol):
    """Protocol for caching resolutions by stop and route."""

    async def get(self, stop_id: str, route: str) -> "CacheEntry | None":
        """Get a usable cache entry.

        Args:
            stop_id: The stop ID.
            route: The route designator.

        Returns:
            The entry if it is younger than the TTL and its source URL has the
            current shape, otherwise None.
        """
        ...

    async def put(self, stop_id: str, route: str, resolution: "ScheduleResolution") -> None:
        """Store a resolution, replacing any previous entry.

        Args:
            stop_id: The stop ID.
            route: The route designator.
            resolution: The resolution to cache.
        """
        ...

    async def invalidate(self, stop_id: str, route: str) -> None:
        """Evict the entry for a stop and route, if any."""
        ...
