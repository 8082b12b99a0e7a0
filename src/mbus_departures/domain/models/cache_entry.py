"""Cache entry domain model."""

from dataclasses import dataclass

from mbus_departures.domain.models.schedule_resolution import ScheduleResolution


@dataclass(frozen=True)
class CacheEntry:
    """A cached resolution, stamped with the (monotonic) time it was stored."""

    key: str
    timestamp: float
    payload: ScheduleResolution

    def age_seconds(self, now: float) -> float:
        """Age of the entry relative to ``now``."""
        return now - self.timestamp
