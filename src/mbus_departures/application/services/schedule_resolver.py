"""Schedule resolution: cache, live source, static sample, empty."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING

from mbus_departures.application.services.schedule_normalizer import (
    NormalizedSchedules,
    ScheduleNormalizer,
)
from mbus_departures.domain.errors import UpstreamError
from mbus_departures.domain.models import ScheduleQuery, ScheduleResolution
from mbus_departures.domain.ports.schedule_service import ScheduleService
from mbus_departures.domain.time_utils import now_minutes

if TYPE_CHECKING:
    from mbus_departures.domain.contracts.schedule_cache import ScheduleCacheProtocol
    from mbus_departures.domain.ports import ArrivalSource

logger = logging.getLogger(__name__)

NOTE_UNAVAILABLE = "Unable to fetch schedule data"
NOTE_SAMPLE_DATA = "Using sample data — real-time data unavailable"


class ScheduleResolver(ScheduleService):
    """Resolves the next departures of a stop/route pair for a date.

    Each rung of the ladder is tried only if the previous one is absent or
    invalid: a valid cache entry, the live source, the static sample
    timetable of the stop, and finally an empty list. Only live results are
    cached. Upstream failures never propagate to the caller.
    """

    def __init__(
        self,
        arrival_source: ArrivalSource,
        cache: ScheduleCacheProtocol,
        normalizer: ScheduleNormalizer | None = None,
        sample_timetables: Mapping[str, list[str]] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the resolver.

        Args:
            arrival_source: Upstream source adapter.
            cache: Shared resolution cache.
            normalizer: Normalizer for raw arrivals; a default one if omitted.
            sample_timetables: Static HH:MM timetables by stop ID, used when the
                live source fails.
            clock: Returns the current local wall-clock time.
        """
        self._arrival_source = arrival_source
        self._cache = cache
        self._normalizer = normalizer or ScheduleNormalizer()
        self._sample_timetables = sample_timetables or {}
        self._clock = clock

    async def resolve_query(self, query: ScheduleQuery) -> ScheduleResolution:
        """Resolve a validated inbound query."""
        return await self.resolve(query.stop_id, query.route, query.date)

    async def resolve(self, stop_id: str, route: str, date: str | None = None) -> ScheduleResolution:
        """Resolve departures for a stop and route on a date (default: today)."""
        now = self._clock()
        today = now.date().isoformat()
        date = date or today
        current_minutes = now_minutes(now) if date == today else None

        entry = await self._cache.get(stop_id, route)
        if entry is not None and self._is_entry_for(entry.payload, stop_id, route, date):
            logger.debug(f"Cache hit for {entry.key} on {date}")
            return entry.payload

        try:
            records = await self._arrival_source.fetch_arrivals(stop_id, route, date)
            normalized = self._normalizer.normalize(
                records,
                route,
                now_minutes=current_minutes,
                serves_single_day=self._arrival_source.serves_single_day,
            )
        except UpstreamError as e:
            logger.warning(f"Upstream failed for stop {stop_id} route {route} on {date}: {e}")
            await self._cache.invalidate(stop_id, route)
            return self._build_fallback(stop_id, route, date, current_minutes)
        except Exception as e:
            logger.error(
                f"Unexpected error resolving stop {stop_id} route {route} on {date}: {e}",
                exc_info=True,
            )
            await self._cache.invalidate(stop_id, route)
            return self._build_fallback(stop_id, route, date, current_minutes)

        resolution = self._build_resolution(stop_id, route, date, normalized)
        await self._cache.put(stop_id, route, resolution)
        logger.debug(
            f"Resolved {len(resolution.schedules)} departure(s) for stop {stop_id} route {route}"
        )
        return resolution

    @staticmethod
    def _is_entry_for(
        payload: ScheduleResolution, stop_id: str, route: str, date: str
    ) -> bool:
        """Whether a cached resolution answers exactly this stop, route and date."""
        return payload.stop_id == stop_id and payload.route == route and payload.date == date

    def _build_fallback(
        self, stop_id: str, route: str, date: str, current_minutes: int | None
    ) -> ScheduleResolution:
        """Degraded resolution from the static sample, or an empty one."""
        sample = self._sample_timetables.get(stop_id)
        if sample:
            normalized = self._normalizer.normalize_times(sample, now_minutes=current_minutes)
            logger.info(f"Serving sample timetable for stop {stop_id}")
            return self._build_resolution(
                stop_id, route, date, NormalizedSchedules(normalized.schedules, NOTE_SAMPLE_DATA)
            )
        return self._build_resolution(
            stop_id, route, date, NormalizedSchedules([], NOTE_UNAVAILABLE)
        )

    def _build_resolution(
        self, stop_id: str, route: str, date: str, normalized: NormalizedSchedules
    ) -> ScheduleResolution:
        return ScheduleResolution(
            stop_id=stop_id,
            route=route,
            date=date,
            schedules=normalized.schedules,
            source_url=self._arrival_source.build_source_url(stop_id, route, date),
            note=normalized.note,
        )
