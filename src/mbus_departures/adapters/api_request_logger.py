"""Logging of upstream stop times requests, enabled with MBUS_LOG_REQUESTS=true."""

import logging
import os

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})
REDACTED = "***"


def should_log_requests() -> bool:
    """Check if request logging is enabled via the MBUS_LOG_REQUESTS environment variable."""
    return os.getenv("MBUS_LOG_REQUESTS", "").lower() == "true"


def format_headers(headers: dict[str, str]) -> str:
    """Render headers as "Name: value" pairs, hiding credentials."""
    return ", ".join(
        f"{name}: {REDACTED if name.lower() in SENSITIVE_HEADERS else value}"
        for name, value in sorted(headers.items())
    )


def log_stoptimes_request(
    stop_id: str, service_date: str, url: str, headers: dict[str, str] | None = None
) -> None:
    """Log an outgoing stop times request."""
    if not should_log_requests():
        return
    message = f"Upstream request for stop {stop_id} on {service_date}: GET {url}"
    if headers:
        message += f" [{format_headers(headers)}]"
    logger.info(message)


def log_stoptimes_response(
    stop_id: str, service_date: str, outcome: int | str, elapsed_seconds: float
) -> None:
    """Log how a stop times request ended.

    Args:
        stop_id: Requested stop.
        service_date: Requested service date (YYYYMMDD).
        outcome: HTTP status, or a short failure description.
        elapsed_seconds: Wall time spent on the request.
    """
    if not should_log_requests():
        return
    result = f"HTTP {outcome}" if isinstance(outcome, int) else outcome
    logger.info(
        f"Upstream response for stop {stop_id} on {service_date}: "
        f"{result} in {elapsed_seconds * 1000:.0f} ms"
    )
