"""Schedule cache adapters."""

from mbus_departures.adapters.cache.in_memory_schedule_cache import InMemoryScheduleCache

__all__ = ["InMemoryScheduleCache"]
