"""Inbound schedule query domain model."""

from datetime import date as date_type

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from mbus_departures.domain.errors import InvalidQueryError


def normalize_query_date(value: str | None) -> str | None:
    """Return an ISO calendar date (YYYY-MM-DD), or None for a blank value.

    Raises:
        ValueError: If the value is not an ISO calendar date.
    """
    if value is None or not str(value).strip():
        return None
    try:
        return date_type.fromisoformat(str(value).strip()).isoformat()
    except ValueError as e:
        raise ValueError("date must be formatted as YYYY-MM-DD") from e


class ScheduleQuery(BaseModel):
    """A validated request for the next departures of a route at a stop."""

    model_config = ConfigDict(frozen=True)

    stop_id: str
    route: str
    date: str | None = None  # YYYY-MM-DD, defaults to today at resolution time

    @field_validator("stop_id", "route")
    @classmethod
    def validate_required(cls, v: str) -> str:
        """Reject blank identifiers."""
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str | None) -> str | None:
        """Accept only ISO calendar dates."""
        return normalize_query_date(v)

    @classmethod
    def from_params(
        cls, stop_id: str | None, route: str | None, date: str | None = None
    ) -> "ScheduleQuery":
        """Build a query from raw request parameters.

        Raises:
            InvalidQueryError: If stop or route is missing, or the date is malformed.
        """
        if not stop_id or not route:
            raise InvalidQueryError("Missing stop or route parameter")
        try:
            return cls(stop_id=stop_id, route=route, date=date)
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
            raise InvalidQueryError(f"Invalid query parameter(s): {fields}") from e
