"""Domain models for MBus departures."""

from mbus_departures.domain.models.arrival_record import ArrivalRecord
from mbus_departures.domain.models.cache_entry import CacheEntry
from mbus_departures.domain.models.journey_group import JourneyGroup
from mbus_departures.domain.models.merged_departure import MergedDeparture
from mbus_departures.domain.models.refresh_result import RefreshResult
from mbus_departures.domain.models.schedule import Schedule
from mbus_departures.domain.models.schedule_query import ScheduleQuery
from mbus_departures.domain.models.schedule_resolution import MAX_SCHEDULES, ScheduleResolution
from mbus_departures.domain.models.stop_route_pair import StopRoutePair

__all__ = [
    "MAX_SCHEDULES",
    "ArrivalRecord",
    "CacheEntry",
    "JourneyGroup",
    "MergedDeparture",
    "RefreshResult",
    "Schedule",
    "ScheduleQuery",
    "ScheduleResolution",
    "StopRoutePair",
]
