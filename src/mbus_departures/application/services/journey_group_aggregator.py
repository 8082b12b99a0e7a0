"""Aggregation of departures across the stop/route pairs of journey groups."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from mbus_departures.domain.models import (
    MAX_SCHEDULES,
    JourneyGroup,
    MergedDeparture,
    RefreshResult,
)
from mbus_departures.domain.ports.schedule_service import JourneyGroupService
from mbus_departures.domain.time_utils import schedule_sort_key

if TYPE_CHECKING:
    from mbus_departures.application.services.schedule_resolver import ScheduleResolver

logger = logging.getLogger(__name__)


class JourneyGroupAggregator(JourneyGroupService):
    """Merges the departures of every pair in a journey group."""

    def __init__(
        self,
        resolver: ScheduleResolver,
        max_departures: int = MAX_SCHEDULES,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize with the resolver used for each pair."""
        self._resolver = resolver
        self._max_departures = max_departures
        self._clock = clock

    async def resolve_group(
        self, group: JourneyGroup, date: str | None = None
    ) -> list[MergedDeparture]:
        """Resolve all pairs concurrently and return the earliest merged departures.

        A failing pair contributes nothing; it never fails the group. An empty
        list is a valid outcome.
        """
        results = await asyncio.gather(
            *(self._resolver.resolve(pair.stop_id, pair.route, date) for pair in group.stops),
            return_exceptions=True,
        )

        merged: list[MergedDeparture] = []
        for pair, result in zip(group.stops, results, strict=True):
            if isinstance(result, BaseException):
                logger.error(
                    f"Resolving stop {pair.stop_id} route {pair.route} for group "
                    f"'{group.name}' failed: {result}"
                )
                continue
            merged.extend(
                MergedDeparture(schedule=schedule, stop_id=pair.stop_id, route=pair.route)
                for schedule in result.schedules
            )

        merged.sort(key=lambda departure: schedule_sort_key(departure.schedule))
        return merged[: self._max_departures]

    async def refresh_all(
        self, groups: list[JourneyGroup], date: str | None = None
    ) -> RefreshResult:
        """Aggregate every group, waiting for all of them before stamping the result."""
        results = await asyncio.gather(
            *(self.resolve_group(group, date) for group in groups),
            return_exceptions=True,
        )

        departures_by_group: dict[str, list[MergedDeparture]] = {}
        for group, result in zip(groups, results, strict=True):
            if isinstance(result, BaseException):
                logger.error(f"Aggregating group '{group.name}' failed: {result}")
                departures_by_group[group.id] = []
            else:
                departures_by_group[group.id] = result

        last_updated = self._clock()
        logger.info(f"Refreshed {len(groups)} group(s) at {last_updated:%H:%M:%S}")
        return RefreshResult(departures_by_group=departures_by_group, last_updated=last_updated)
