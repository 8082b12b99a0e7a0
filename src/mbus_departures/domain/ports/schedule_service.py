"""Schedule service ports consumed by the outer surfaces."""

from typing import Protocol

from mbus_departures.domain.models import (
    JourneyGroup,
    MergedDeparture,
    RefreshResult,
    ScheduleQuery,
    ScheduleResolution,
)


class ScheduleService(Protocol):
    """Port for resolving a single stop/route query."""

    async def resolve_query(self, query: ScheduleQuery) -> ScheduleResolution:
        """Resolve a validated query. Never raises for upstream failures."""
        ...


class JourneyGroupService(Protocol):
    """Port for aggregating departures of journey groups."""

    async def resolve_group(
        self, group: JourneyGroup, date: str | None = None
    ) -> list[MergedDeparture]:
        """Merged, time-ordered departures of one group."""
        ...

    async def refresh_all(
        self, groups: list[JourneyGroup], date: str | None = None
    ) -> RefreshResult:
        """Aggregate all groups and stamp the refresh time."""
        ...
