"""Schedule resolution domain model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mbus_departures.domain.models.schedule import Schedule
from mbus_departures.domain.time_utils import schedule_sort_key

MAX_SCHEDULES = 3


class ScheduleResolution(BaseModel):
    """The result of resolving one stop/route pair for one date.

    ``schedules`` is sorted ascending by time and holds at most
    ``MAX_SCHEDULES`` entries.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    stop_id: str = Field(serialization_alias="stop")
    route: str
    date: str
    schedules: list[Schedule]
    source_url: str = Field(serialization_alias="url")
    note: str | None = None

    @field_validator("schedules")
    @classmethod
    def validate_schedules(cls, v: list[Schedule]) -> list[Schedule]:
        """Enforce the display window and ascending order."""
        if len(v) > MAX_SCHEDULES:
            raise ValueError(f"schedules must hold at most {MAX_SCHEDULES} entries, got {len(v)}")
        keys = [schedule_sort_key(s) for s in v]
        if keys != sorted(keys):
            raise ValueError("schedules must be sorted ascending by time")
        return v

    def to_response(self) -> dict[str, Any]:
        """Serialize to the inbound query response shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_defaults=True)
