"""Schedule domain model."""

from pydantic import BaseModel, ConfigDict, Field

NEXT_DAY_SUFFIX = " (+1 day)"


class Schedule(BaseModel):
    """One departure as shown to the user.

    ``time`` is local wall-clock HH:MM. ``next_day`` marks the first departures
    of the following calendar day when nothing is left today.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    time: str
    destination: str | None = None
    delay_seconds: int | None = Field(default=None, serialization_alias="delay")
    is_realtime: bool | None = Field(default=None, serialization_alias="realtime")
    next_day: bool = Field(default=False, serialization_alias="nextDay")

    @property
    def display_time(self) -> str:
        """Time with the "(+1 day)" annotation when it belongs to tomorrow."""
        return f"{self.time}{NEXT_DAY_SUFFIX}" if self.next_day else self.time
