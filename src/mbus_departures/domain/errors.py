"""Domain error taxonomy."""


class MbusError(Exception):
    """Base class for all errors raised by the schedule engine."""


class UpstreamError(MbusError):
    """The upstream transit data source could not deliver usable arrivals."""


class UpstreamUnavailableError(UpstreamError):
    """Timeout, network failure or non-2xx response from the upstream source."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize with a message and the HTTP status code, if any."""
        super().__init__(message)
        self.status_code = status_code


class UpstreamEmptyError(UpstreamError):
    """The upstream payload parsed, but yielded zero usable records."""


class MalformedTimeError(ValueError):
    """A time string could not be parsed as HH:MM."""


class InvalidQueryError(MbusError, ValueError):
    """A caller supplied an invalid query (e.g. missing stop or route)."""
