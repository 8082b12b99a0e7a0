"""Arrival source port."""

from typing import Protocol

from mbus_departures.domain.models.arrival_record import ArrivalRecord


class ArrivalSource(Protocol):
    """Port for one generation of the upstream transit data source."""

    serves_single_day: bool
    """True when a response only covers the requested calendar day."""

    async def fetch_arrivals(self, stop_id: str, route: str, date: str) -> list[ArrivalRecord]:
        """Fetch raw arrivals for a stop on a date (YYYY-MM-DD).

        Raises:
            UpstreamUnavailableError: On timeout, network failure or non-2xx response.
            UpstreamEmptyError: On an empty or unparseable payload.
        """
        ...

    def build_source_url(self, stop_id: str, route: str, date: str) -> str:
        """User-followable URL of the source data for a stop, route and date."""
        ...

    def is_current_source_url(self, url: str) -> bool:
        """Whether ``url`` has the shape of this source generation's URLs."""
        ...
