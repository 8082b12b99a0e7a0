"""Adapters layer - external system integrations."""

from mbus_departures.adapters.cache import InMemoryScheduleCache
from mbus_departures.adapters.config import AppConfig
from mbus_departures.adapters.otp_api import OtpArrivalSource

__all__ = [
    "AppConfig",
    "InMemoryScheduleCache",
    "OtpArrivalSource",
]
