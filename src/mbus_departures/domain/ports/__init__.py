"""Ports (interfaces) for the ports-and-adapters architecture."""

from mbus_departures.domain.ports.arrival_source import ArrivalSource
from mbus_departures.domain.ports.schedule_service import JourneyGroupService, ScheduleService

__all__ = [
    "ArrivalSource",
    "JourneyGroupService",
    "ScheduleService",
]
