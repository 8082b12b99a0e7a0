"""Constants for the OpenTripPlanner (OTP 1.x) index API adapter.

Stop times of one stop and service day:
GET {base}/index/stops/{stopId}/stoptimes/{YYYYMMDD}
"""

# Current API generation of the Marprom timetable service
OTP_BASE_URL = "https://vozniredi.marprom.si/otp/routers/default"
OTP_STOPTIMES_PATH = "/index/stops/{stop_id}/stoptimes/{service_date}"

# Decommissioned HTML timetable pages; cached links to these are never served
LEGACY_SOURCE_URL_PATTERNS = ("vozniredi.marprom.si/?stop=",)

DEFAULT_CLIENT_IDENTIFIER = "mbus-departures/1.0"

DEFAULT_HEADERS = {
    "Accept": "application/json",
}

# OTP realtime states of trips that will not serve the stop
SKIPPED_REALTIME_STATES = frozenset({"CANCELED", "CANCELLED"})
