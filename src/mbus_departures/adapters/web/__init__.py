"""Web adapters."""

from mbus_departures.adapters.web.schedule_api import create_app
from mbus_departures.adapters.web.server import ScheduleApiServer

__all__ = ["ScheduleApiServer", "create_app"]
