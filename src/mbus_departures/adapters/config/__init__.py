"""Configuration adapters."""

from mbus_departures.adapters.config.app_config import AppConfig
from mbus_departures.adapters.config.journey_group_loader import (
    JourneyGroupLoader,
    parse_journey_group,
)

__all__ = ["AppConfig", "JourneyGroupLoader", "parse_journey_group"]
