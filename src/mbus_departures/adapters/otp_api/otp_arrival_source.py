"""Arrival source backed by the OTP index API."""

import logging
from datetime import date as date_type
from typing import TYPE_CHECKING

from mbus_departures.adapters.otp_api.constants import (
    DEFAULT_CLIENT_IDENTIFIER,
    LEGACY_SOURCE_URL_PATTERNS,
    OTP_BASE_URL,
)
from mbus_departures.adapters.otp_api.http_client import OtpHttpClient
from mbus_departures.adapters.otp_api.stoptimes_parser import StoptimesParser
from mbus_departures.domain.models.arrival_record import ArrivalRecord
from mbus_departures.domain.ports.arrival_source import ArrivalSource

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientSession


class OtpArrivalSource(ArrivalSource):
    """Adapter for stop times served by an OpenTripPlanner router."""

    serves_single_day = True

    def __init__(
        self,
        session: "ClientSession | None" = None,
        base_url: str = OTP_BASE_URL,
        timeout_seconds: float = 8.0,
        client_identifier: str = DEFAULT_CLIENT_IDENTIFIER,
        legacy_url_patterns: tuple[str, ...] | list[str] = LEGACY_SOURCE_URL_PATTERNS,
    ) -> None:
        """Initialize with optional aiohttp session and endpoint settings."""
        self._http_client = OtpHttpClient(
            session=session,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            client_identifier=client_identifier,
        )
        self._legacy_url_patterns = tuple(legacy_url_patterns)

    async def fetch_arrivals(self, stop_id: str, route: str, date: str) -> list[ArrivalRecord]:
        """Fetch the arrivals of all routes at a stop on a date.

        Route filtering is left to normalization; OTP has no route parameter
        for stop times.
        """
        payload = await self._http_client.fetch_stoptimes(stop_id, self._service_date(date))
        records = StoptimesParser.parse(payload)
        logger.debug(f"Fetched {len(records)} arrival(s) for stop {stop_id} (route {route})")
        return records

    def build_source_url(self, stop_id: str, route: str, date: str) -> str:  # noqa: ARG002
        """Stop times URL of the stop; the same for every route."""
        return self._http_client.stoptimes_url(stop_id, self._service_date(date))

    def is_current_source_url(self, url: str) -> bool:
        """Whether ``url`` is a stop times URL of the configured router."""
        if any(pattern in url for pattern in self._legacy_url_patterns):
            return False
        return url.startswith(f"{self._http_client.base_url}/index/stops/")

    @staticmethod
    def _service_date(date: str) -> str:
        """Convert YYYY-MM-DD into OTP's YYYYMMDD."""
        try:
            return date_type.fromisoformat(date).strftime("%Y%m%d")
        except ValueError:
            return date.replace("-", "")
