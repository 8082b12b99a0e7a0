"""OpenTripPlanner index API adapters."""

from mbus_departures.adapters.otp_api.otp_arrival_source import OtpArrivalSource

__all__ = [
    "OtpArrivalSource",
]
