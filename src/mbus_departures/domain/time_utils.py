"""Conversions between seconds-since-midnight, "HH:MM" and minutes-since-midnight."""

import math
import re
from datetime import datetime
from typing import TYPE_CHECKING

from mbus_departures.domain.errors import MalformedTimeError

if TYPE_CHECKING:
    from mbus_departures.domain.models.schedule import Schedule

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def seconds_to_time(seconds: int) -> str:
    """Format seconds since midnight as zero-padded HH:MM.

    Seconds are truncated, never rounded. Service-day times past midnight
    keep counting (e.g. 87000 -> "24:10") so that ordering stays monotonic.
    """
    if seconds < 0:
        raise ValueError(f"seconds must not be negative, got {seconds}")
    hours, remainder = divmod(int(seconds), 3600)
    return f"{hours:02d}:{remainder // 60:02d}"


def parse_time_to_minutes(value: str) -> int:
    """Parse HH:MM into minutes since midnight.

    Raises:
        MalformedTimeError: If the value is not a valid HH:MM string.
    """
    if not isinstance(value, str):
        raise MalformedTimeError(f"Expected HH:MM string, got {value!r}")
    match = _TIME_PATTERN.match(value)
    if not match:
        raise MalformedTimeError(f"Malformed time: {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes >= 60:
        raise MalformedTimeError(f"Malformed time: {value!r}")
    return hours * 60 + minutes


def time_to_minutes(value: str) -> int | float:
    """Return minutes since midnight, or infinity for malformed input.

    Malformed entries therefore always sort last and never compare as
    earlier than the current time.
    """
    try:
        return parse_time_to_minutes(value)
    except MalformedTimeError:
        return math.inf


def minutes_to_time(minutes: int) -> str:
    """Format minutes since midnight as HH:MM."""
    return seconds_to_time(minutes * 60)


def now_minutes(now: datetime | None = None) -> int:
    """Minutes since midnight of the given (or current local) wall-clock time."""
    now = now or datetime.now()
    return now.hour * 60 + now.minute


def now_formatted(now: datetime | None = None) -> str:
    """Current wall-clock time as HH:MM."""
    return minutes_to_time(now_minutes(now))


def schedule_sort_key(schedule: "Schedule") -> int | float:
    """Sort key for a departure: minutes since midnight, shifted a day if it is tomorrow's."""
    minutes = time_to_minutes(schedule.time)
    if schedule.next_day:
        return minutes + MINUTES_PER_DAY
    return minutes
