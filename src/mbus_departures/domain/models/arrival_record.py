"""Raw arrival record domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ArrivalRecord:
    """One arrival as delivered by an upstream source, before normalization."""

    route: str
    scheduled_seconds: int  # Seconds since midnight of the service day
    realtime_seconds: int | None = None
    is_realtime: bool = False
    delay_seconds: int | None = None
    destination: str | None = None
    has_passed: bool = False

    @property
    def effective_seconds(self) -> int:
        """Realtime time when the source flags it as realtime, else the scheduled time."""
        if self.is_realtime and self.realtime_seconds is not None:
            return self.realtime_seconds
        return self.scheduled_seconds
