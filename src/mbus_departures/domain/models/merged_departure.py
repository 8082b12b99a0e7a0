"""Merged departure domain model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mbus_departures.domain.models.schedule import Schedule


class MergedDeparture(BaseModel):
    """A departure of a journey group, tagged with the pair it came from."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schedule: Schedule
    stop_id: str = Field(serialization_alias="stopId")
    route: str

    def to_response(self) -> dict[str, Any]:
        """Serialize for the group departures response."""
        return self.model_dump(mode="json", by_alias=True, exclude_defaults=True)
