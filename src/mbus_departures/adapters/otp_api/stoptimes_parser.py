"""Parser for OTP index API stop times responses."""

import logging
from typing import Any

from mbus_departures.adapters.otp_api.constants import SKIPPED_REALTIME_STATES
from mbus_departures.domain.errors import UpstreamEmptyError
from mbus_departures.domain.models.arrival_record import ArrivalRecord

logger = logging.getLogger(__name__)


class StoptimesParser:
    """Parses ``StopTimesInPattern`` lists into ArrivalRecord objects.

    Response structure::

        [
          {
            "pattern": {"id": "MARPROM:G6:0:01", "desc": "G6 to Tezno"},
            "times": [
              {
                "scheduledDeparture": 27000,
                "realtimeDeparture": 27060,
                "departureDelay": 60,
                "realtime": true,
                "realtimeState": "UPDATED",
                "headsign": "Tezno"
              }
            ]
          }
        ]
    """

    @staticmethod
    def parse(payload: Any) -> list[ArrivalRecord]:
        """Parse a stop times payload.

        Raises:
            UpstreamEmptyError: If the payload is not a pattern list or holds no
                usable arrival.
        """
        if not isinstance(payload, list):
            raise UpstreamEmptyError(
                f"Expected a list of stop time patterns, got {type(payload).__name__}"
            )

        records: list[ArrivalRecord] = []
        for pattern_times in payload:
            if not isinstance(pattern_times, dict):
                continue
            route = StoptimesParser._extract_route(pattern_times.get("pattern") or {})
            if not route:
                logger.debug(f"Skipping stop time pattern without route: {pattern_times}")
                continue
            for time_data in pattern_times.get("times") or []:
                record = StoptimesParser._parse_time(time_data, route)
                if record:
                    records.append(record)

        if not records:
            raise UpstreamEmptyError("Stop times payload contained no usable arrivals")
        return records

    @staticmethod
    def _extract_route(pattern: dict[str, Any]) -> str:
        """Route designator of a pattern.

        Prefers an explicit short name; otherwise the second segment of the
        pattern ID ("agency:route:direction:variant").
        """
        short_name = pattern.get("routeShortName") or pattern.get("route")
        if short_name:
            return str(short_name).strip()
        parts = str(pattern.get("id", "")).split(":")
        return parts[1].strip() if len(parts) >= 2 else ""

    @staticmethod
    def _parse_time(time_data: Any, route: str) -> ArrivalRecord | None:
        """Parse a single trip time, or None if it is unusable."""
        if not isinstance(time_data, dict):
            return None
        if time_data.get("realtimeState") in SKIPPED_REALTIME_STATES:
            return None

        scheduled = StoptimesParser._parse_seconds(time_data.get("scheduledDeparture"))
        if scheduled is None:
            return None
        realtime = StoptimesParser._parse_seconds(time_data.get("realtimeDeparture"))
        delay = StoptimesParser._parse_seconds(time_data.get("departureDelay"), allow_negative=True)

        return ArrivalRecord(
            route=route,
            scheduled_seconds=scheduled,
            realtime_seconds=realtime,
            is_realtime=bool(time_data.get("realtime", False)) and realtime is not None,
            delay_seconds=delay if delay else None,
            destination=(time_data.get("headsign") or "").strip() or None,
            has_passed=bool(time_data.get("passed", False)),
        )

    @staticmethod
    def _parse_seconds(value: Any, allow_negative: bool = False) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            seconds = int(value)
        except (ValueError, TypeError):
            return None
        if seconds < 0 and not allow_negative:
            return None
        return seconds
