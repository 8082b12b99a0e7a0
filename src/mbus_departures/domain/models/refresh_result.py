"""Refresh result domain model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from mbus_departures.domain.models.merged_departure import MergedDeparture


@dataclass(frozen=True)
class RefreshResult:
    """Merged departures of every journey group, stamped after all groups settled."""

    departures_by_group: dict[str, list[MergedDeparture]]
    last_updated: datetime

    def to_response(self) -> dict[str, Any]:
        """Serialize for the group departures response."""
        return {
            "groups": {
                group_id: [departure.to_response() for departure in departures]
                for group_id, departures in self.departures_by_group.items()
            },
            "lastUpdated": self.last_updated.isoformat(),
        }
