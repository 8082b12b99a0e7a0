"""Domain layer - core business logic and models."""

from mbus_departures.domain.errors import (
    InvalidQueryError,
    MalformedTimeError,
    MbusError,
    UpstreamEmptyError,
    UpstreamError,
    UpstreamUnavailableError,
)
from mbus_departures.domain.models import (
    JourneyGroup,
    MergedDeparture,
    Schedule,
    ScheduleResolution,
    StopRoutePair,
)
from mbus_departures.domain.ports import ArrivalSource

__all__ = [
    "ArrivalSource",
    "InvalidQueryError",
    "JourneyGroup",
    "MalformedTimeError",
    "MbusError",
    "MergedDeparture",
    "Schedule",
    "ScheduleResolution",
    "StopRoutePair",
    "UpstreamEmptyError",
    "UpstreamError",
    "UpstreamUnavailableError",
]
