"""Wiring of the schedule engine from the app config."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mbus_departures.adapters.arrival_source_factory import create_arrival_source
from mbus_departures.adapters.cache import InMemoryScheduleCache
from mbus_departures.adapters.config import AppConfig
from mbus_departures.adapters.sample_timetables import SAMPLE_TIMETABLES
from mbus_departures.application.services import (
    JourneyGroupAggregator,
    ScheduleNormalizer,
    ScheduleResolver,
)

if TYPE_CHECKING:
    from aiohttp import ClientSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleEngine:
    """The process-wide resolver, aggregator and cache."""

    resolver: ScheduleResolver
    aggregator: JourneyGroupAggregator
    cache: InMemoryScheduleCache


def create_engine(config: AppConfig, session: "ClientSession") -> ScheduleEngine:
    """Create the engine once per process, sharing one cache and HTTP session."""
    arrival_source = create_arrival_source(config, session)
    cache = InMemoryScheduleCache(
        ttl_seconds=config.cache_ttl_seconds,
        is_current_source_url=arrival_source.is_current_source_url,
    )
    resolver = ScheduleResolver(
        arrival_source=arrival_source,
        cache=cache,
        normalizer=ScheduleNormalizer(max_departures=config.max_departures),
        sample_timetables=SAMPLE_TIMETABLES if config.use_sample_timetables else None,
    )
    aggregator = JourneyGroupAggregator(resolver, max_departures=config.max_departures)
    logger.debug(
        f"Schedule engine ready (ttl={config.cache_ttl_seconds}s, "
        f"max_departures={config.max_departures})"
    )
    return ScheduleEngine(resolver=resolver, aggregator=aggregator, cache=cache)
