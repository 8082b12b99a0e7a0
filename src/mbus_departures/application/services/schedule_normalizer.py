"""Normalization of raw upstream arrivals into display schedules."""

import logging
from dataclasses import dataclass

from mbus_departures.domain.errors import UpstreamEmptyError
from mbus_departures.domain.models import MAX_SCHEDULES, ArrivalRecord, Schedule
from mbus_departures.domain.time_utils import seconds_to_time, time_to_minutes

logger = logging.getLogger(__name__)

NOTE_NEXT_AVAILABLE = "No more buses today — showing next available departures"
NOTE_DAY_ROLLOVER = "No more buses today — showing tomorrow's first departures"


@dataclass(frozen=True)
class NormalizedSchedules:
    """Display-window schedules plus an optional explanatory note."""

    schedules: list[Schedule]
    note: str | None = None


class ScheduleNormalizer:
    """Maps raw arrivals to at most ``max_departures`` upcoming schedules."""

    def __init__(self, max_departures: int = MAX_SCHEDULES) -> None:
        """Initialize with the size of the display window."""
        if not 0 < max_departures <= MAX_SCHEDULES:
            raise ValueError(f"max_departures must be between 1 and {MAX_SCHEDULES}")
        self._max_departures = max_departures

    def normalize(
        self,
        records: list[ArrivalRecord],
        route: str,
        *,
        now_minutes: int | None,
        serves_single_day: bool,
    ) -> NormalizedSchedules:
        """Normalize upstream records for one route.

        Args:
            records: Raw arrivals of a stop, in upstream order.
            route: Route designator to keep (exact match). Empty keeps all.
            now_minutes: Current minutes since midnight, or None to skip the
                future filter (the requested date is not today).
            serves_single_day: Whether the source only covers the requested day,
                so an exhausted day rolls over to tomorrow's first departures.

        Raises:
            UpstreamEmptyError: If no record matches the route.
        """
        matching = [r for r in records if not route or r.route == route]
        if not matching:
            raise UpstreamEmptyError(
                f"No arrivals for route {route!r} among {len(records)} upstream record(s)"
            )

        all_schedules = self._sorted_schedules(matching)
        upcoming = [r for r in matching if not r.has_passed]
        if not upcoming:
            logger.debug(f"All {len(matching)} arrival(s) of route {route} have already passed")
            if serves_single_day:
                return self._day_rollover(all_schedules)
            return NormalizedSchedules(self._window(all_schedules), NOTE_NEXT_AVAILABLE)

        return self.apply_future_filter(
            self._sorted_schedules(upcoming),
            now_minutes=now_minutes,
            serves_single_day=serves_single_day,
            rollover_candidates=all_schedules,
        )

    def normalize_times(
        self, times: list[str], *, now_minutes: int | None, serves_single_day: bool = True
    ) -> NormalizedSchedules:
        """Normalize a plain HH:MM timetable, e.g. a static sample."""
        schedules = sorted((Schedule(time=t) for t in times), key=lambda s: time_to_minutes(s.time))
        return self.apply_future_filter(
            self._deduplicate(schedules),
            now_minutes=now_minutes,
            serves_single_day=serves_single_day,
        )

    def apply_future_filter(
        self,
        schedules: list[Schedule],
        *,
        now_minutes: int | None,
        serves_single_day: bool,
        rollover_candidates: list[Schedule] | None = None,
    ) -> NormalizedSchedules:
        """Keep departures strictly after ``now_minutes`` and cut to the display window.

        When nothing is left, a single-day source rolls over to tomorrow's
        first departures; any other source falls back to the earliest ones.
        """
        if now_minutes is None:
            return NormalizedSchedules(self._window(schedules))

        future = [s for s in schedules if time_to_minutes(s.time) > now_minutes]
        if future:
            return NormalizedSchedules(self._window(future))

        if serves_single_day:
            return self._day_rollover(
                schedules if rollover_candidates is None else rollover_candidates
            )
        return NormalizedSchedules(self._window(schedules), NOTE_NEXT_AVAILABLE)

    def _day_rollover(self, schedules: list[Schedule]) -> NormalizedSchedules:
        """Tomorrow's first departures, assuming the same timetable."""
        rolled = [s.model_copy(update={"next_day": True}) for s in self._window(schedules)]
        return NormalizedSchedules(rolled, NOTE_DAY_ROLLOVER)

    def _window(self, schedules: list[Schedule]) -> list[Schedule]:
        return schedules[: self._max_departures]

    def _sorted_schedules(self, records: list[ArrivalRecord]) -> list[Schedule]:
        """Convert records to schedules ordered by effective time (stable on ties)."""
        ordered = sorted(records, key=lambda r: r.effective_seconds)
        return self._deduplicate([self._to_schedule(r) for r in ordered])

    @staticmethod
    def _to_schedule(record: ArrivalRecord) -> Schedule:
        return Schedule(
            time=seconds_to_time(record.effective_seconds),
            destination=record.destination or None,
            delay_seconds=record.delay_seconds,
            is_realtime=record.is_realtime,
        )

    @staticmethod
    def _deduplicate(schedules: list[Schedule]) -> list[Schedule]:
        """Drop repeated (time, destination) entries, keeping the first."""
        seen: set[tuple[str, str | None]] = set()
        unique = []
        for schedule in schedules:
            key = (schedule.time, schedule.destination)
            if key not in seen:
                seen.add(key)
                unique.append(schedule)
        return unique
