"""Static sample timetables served when live data is unavailable."""

from mbus_departures.domain.time_utils import minutes_to_time


def _every(start: str, end: str, step_minutes: int = 30) -> list[str]:
    """HH:MM departures from ``start`` to ``end`` inclusive."""
    start_h, start_m = (int(part) for part in start.split(":"))
    end_h, end_m = (int(part) for part in end.split(":"))
    return [
        minutes_to_time(minutes)
        for minutes in range(start_h * 60 + start_m, end_h * 60 + end_m + 1, step_minutes)
    ]


# Stop ID -> daily departures
SAMPLE_TIMETABLES: dict[str, list[str]] = {
    "255": _every("07:15", "20:45"),
    "359": _every("07:30", "21:00"),
    "347": _every("07:20", "20:20"),
}
