"""Application services (use cases) for schedule resolution."""

from mbus_departures.application.services.journey_group_aggregator import JourneyGroupAggregator
from mbus_departures.application.services.schedule_normalizer import (
    NOTE_DAY_ROLLOVER,
    NOTE_NEXT_AVAILABLE,
    NormalizedSchedules,
    ScheduleNormalizer,
)
from mbus_departures.application.services.schedule_resolver import (
    NOTE_SAMPLE_DATA,
    NOTE_UNAVAILABLE,
    ScheduleResolver,
)

__all__ = [
    "NOTE_DAY_ROLLOVER",
    "NOTE_NEXT_AVAILABLE",
    "NOTE_SAMPLE_DATA",
    "NOTE_UNAVAILABLE",
    "JourneyGroupAggregator",
    "NormalizedSchedules",
    "ScheduleNormalizer",
    "ScheduleResolver",
]
