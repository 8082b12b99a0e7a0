"""Tests for the schedule resolver fallback ladder."""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from mbus_departures.adapters.cache import InMemoryScheduleCache
from mbus_departures.application.services import (
    NOTE_DAY_ROLLOVER,
    NOTE_SAMPLE_DATA,
    NOTE_UNAVAILABLE,
    ScheduleResolver,
)
from mbus_departures.domain.errors import UpstreamEmptyError, UpstreamUnavailableError
from mbus_departures.domain.models import (
    ArrivalRecord,
    CacheEntry,
    ScheduleQuery,
    ScheduleResolution,
)
from mbus_departures.domain.time_utils import parse_time_to_minutes

BASE_URL = "https://otp.example.org/otp/routers/default"
TODAY = "2025-03-14"


class FakeClock:
    """Wall clock returning a fixed local time."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeArrivalSource:
    """Arrival source returning canned records or raising a canned error."""

    serves_single_day = True

    def __init__(
        self, records: list[ArrivalRecord] | None = None, error: Exception | None = None
    ) -> None:
        self.records = records or []
        self.error = error
        self.calls: list[tuple[str, str, str]] = []

    async def fetch_arrivals(self, stop_id: str, route: str, date: str) -> list[ArrivalRecord]:
        self.calls.append((stop_id, route, date))
        if self.error:
            raise self.error
        return self.records

    def build_source_url(self, stop_id: str, route: str, date: str) -> str:
        return f"{BASE_URL}/index/stops/{stop_id}/stoptimes/{date.replace('-', '')}"

    def is_current_source_url(self, url: str) -> bool:
        return url.startswith(f"{BASE_URL}/index/stops/")


def arrival(route: str, hhmm: str, **kwargs: object) -> ArrivalRecord:
    """Create an arrival record scheduled at HH:MM."""
    return ArrivalRecord(route=route, scheduled_seconds=parse_time_to_minutes(hhmm) * 60, **kwargs)  # type: ignore[arg-type]


def times(resolution: ScheduleResolution) -> list[str]:
    """Times of a resolution."""
    return [s.time for s in resolution.schedules]


@pytest.fixture
def clock() -> FakeClock:
    """Friday morning at 07:00."""
    return FakeClock(datetime(2025, 3, 14, 7, 0))


@pytest.fixture
def cache() -> InMemoryScheduleCache:
    """Provide an empty cache."""
    return InMemoryScheduleCache()


def make_resolver(
    source: FakeArrivalSource,
    cache: InMemoryScheduleCache,
    clock: FakeClock,
    sample_timetables: dict[str, list[str]] | None = None,
) -> ScheduleResolver:
    """Create a resolver over the fake source."""
    return ScheduleResolver(
        arrival_source=source,
        cache=cache,
        sample_timetables=sample_timetables,
        clock=clock,
    )


class TestLiveResolution:
    """Tests for successful live resolutions."""

    @pytest.mark.asyncio
    async def test_when_upstream_succeeds_then_returns_top_three(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given five upcoming G6 departures, when resolving, then the earliest three are returned."""
        source = FakeArrivalSource(
            [arrival("G6", t) for t in ["08:30", "07:10", "07:40", "09:00", "08:00"]]
            + [arrival("G1", "07:05")]
        )
        resolver = make_resolver(source, cache, clock)

        resolution = await resolver.resolve("255", "G6")

        assert times(resolution) == ["07:10", "07:40", "08:00"]
        assert resolution.date == TODAY
        assert resolution.note is None
        assert resolution.source_url == f"{BASE_URL}/index/stops/255/stoptimes/20250314"
        assert source.calls == [("255", "G6", TODAY)]

    @pytest.mark.asyncio
    async def test_when_resolved_twice_within_ttl_then_upstream_called_once(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given a cached resolution, when resolving again, then the identical result is returned."""
        source = FakeArrivalSource([arrival("G6", "08:00")])
        resolver = make_resolver(source, cache, clock)

        first = await resolver.resolve("255", "G6")
        second = await resolver.resolve("255", "G6")

        assert first == second
        assert len(source.calls) == 1

    @pytest.mark.asyncio
    async def test_when_cache_expired_then_upstream_called_again(
        self, clock: FakeClock
    ) -> None:
        """Given an entry older than the TTL, when resolving, then upstream is queried again."""
        monotonic = [0.0]
        cache = InMemoryScheduleCache(ttl_seconds=60, clock=lambda: monotonic[0])
        source = FakeArrivalSource([arrival("G6", "08:00")])
        resolver = make_resolver(source, cache, clock)

        await resolver.resolve("255", "G6")
        monotonic[0] = 61.0
        await resolver.resolve("255", "G6")

        assert len(source.calls) == 2

    @pytest.mark.asyncio
    async def test_when_cached_url_has_legacy_shape_then_refetched(
        self, clock: FakeClock
    ) -> None:
        """Given a fresh entry linking to a legacy page, when resolving, then live data replaces it."""
        source = FakeArrivalSource([arrival("G6", "08:00")])
        cache = InMemoryScheduleCache(is_current_source_url=source.is_current_source_url)
        await cache.put(
            "255",
            "G6",
            ScheduleResolution(
                stop_id="255",
                route="G6",
                date=TODAY,
                schedules=[],
                source_url="https://vozniredi.marprom.si/?stop=255&l=G6",
            ),
        )
        resolver = make_resolver(source, cache, clock)

        resolution = await resolver.resolve("255", "G6")

        assert times(resolution) == ["08:00"]
        assert len(source.calls) == 1
        entry = await cache.get("255", "G6")
        assert entry is not None
        assert entry.payload.source_url.startswith(BASE_URL)

    @pytest.mark.asyncio
    async def test_when_cached_for_other_date_then_refetched(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given a cached resolution for today, when resolving tomorrow, then upstream is queried."""
        source = FakeArrivalSource([arrival("G6", "08:00")])
        resolver = make_resolver(source, cache, clock)

        await resolver.resolve("255", "G6")
        resolution = await resolver.resolve("255", "G6", "2025-03-15")

        assert resolution.date == "2025-03-15"
        assert [call[2] for call in source.calls] == [TODAY, "2025-03-15"]

    @pytest.mark.asyncio
    async def test_when_stop_and_route_share_a_label_then_each_pair_fetched(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given stop "1-2" route "G6" resolved, when resolving stop "1" route "2-G6", then it is fetched."""
        source = FakeArrivalSource([arrival("G6", "08:00"), arrival("2-G6", "08:30")])
        resolver = make_resolver(source, cache, clock)

        first = await resolver.resolve("1-2", "G6")
        second = await resolver.resolve("1", "2-G6")

        assert (first.stop_id, first.route, times(first)) == ("1-2", "G6", ["08:00"])
        assert (second.stop_id, second.route, times(second)) == ("1", "2-G6", ["08:30"])
        assert source.calls == [("1-2", "G6", TODAY), ("1", "2-G6", TODAY)]

    @pytest.mark.asyncio
    async def test_when_cache_returns_other_pair_then_not_served(self, clock: FakeClock) -> None:
        """Given a cache answering with another pair's entry, when resolving, then upstream is queried."""
        other = ScheduleResolution(
            stop_id="1-2",
            route="G6",
            date=TODAY,
            schedules=[],
            source_url=f"{BASE_URL}/index/stops/1-2/stoptimes/20250314",
        )
        cache = AsyncMock()
        cache.get.return_value = CacheEntry(key="1-2-G6", timestamp=0.0, payload=other)
        source = FakeArrivalSource([arrival("2-G6", "08:30")])
        resolver = make_resolver(source, cache, clock)

        resolution = await resolver.resolve("1", "2-G6")

        assert resolution.stop_id == "1"
        assert times(resolution) == ["08:30"]
        assert len(source.calls) == 1

    @pytest.mark.asyncio
    async def test_when_future_date_then_first_departures_of_that_day(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given a later date, when resolving, then departures before now are still shown."""
        clock.now = datetime(2025, 3, 14, 12, 0)
        source = FakeArrivalSource([arrival("G6", t) for t in ["05:00", "06:00", "13:00"]])
        resolver = make_resolver(source, cache, clock)

        resolution = await resolver.resolve("255", "G6", "2025-03-15")

        assert times(resolution) == ["05:00", "06:00", "13:00"]
        assert resolution.note is None

    @pytest.mark.asyncio
    async def test_when_past_departures_today_then_only_future_shown(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given it is 12:00, when resolving today, then only later departures are shown."""
        clock.now = datetime(2025, 3, 14, 12, 0)
        source = FakeArrivalSource([arrival("G6", t) for t in ["05:00", "06:00", "13:00"]])
        resolver = make_resolver(source, cache, clock)

        resolution = await resolver.resolve("255", "G6")

        assert times(resolution) == ["13:00"]

    @pytest.mark.asyncio
    async def test_when_day_exhausted_then_tomorrow_first_departures(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given it is 23:50 and only morning times, when resolving, then they roll over."""
        clock.now = datetime(2025, 3, 14, 23, 50)
        source = FakeArrivalSource([arrival("G6", "07:30"), arrival("G6", "08:00")])
        resolver = make_resolver(source, cache, clock)

        resolution = await resolver.resolve("255", "G6")

        assert [s.display_time for s in resolution.schedules] == [
            "07:30 (+1 day)",
            "08:00 (+1 day)",
        ]
        assert resolution.note == NOTE_DAY_ROLLOVER

    @pytest.mark.asyncio
    async def test_resolve_query_uses_query_fields(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given a validated query, when resolving it, then its stop, route and date are used."""
        source = FakeArrivalSource([arrival("G6", "08:00")])
        resolver = make_resolver(source, cache, clock)

        resolution = await resolver.resolve_query(
            ScheduleQuery(stop_id="255", route="G6", date="2025-03-15")
        )

        assert source.calls == [("255", "G6", "2025-03-15")]
        assert resolution.stop_id == "255"


class TestFallbacks:
    """Tests for the degraded rungs of the ladder."""

    @pytest.mark.asyncio
    async def test_when_unavailable_without_sample_then_empty_with_note(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given a timeout and no sample, when resolving, then an empty resolution is returned."""
        source = FakeArrivalSource(error=UpstreamUnavailableError("timeout"))
        resolver = make_resolver(source, cache, clock)

        resolution = await resolver.resolve("255", "G6")

        assert resolution.schedules == []
        assert resolution.note == NOTE_UNAVAILABLE
        assert resolution.source_url == f"{BASE_URL}/index/stops/255/stoptimes/20250314"
        assert cache.keys() == set()

    @pytest.mark.asyncio
    async def test_when_unavailable_with_sample_then_sample_not_cached(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given a sample timetable, when upstream fails, then the sample is served but not cached."""
        clock.now = datetime(2025, 3, 14, 8, 0)
        source = FakeArrivalSource(error=UpstreamUnavailableError("HTTP 503", status_code=503))
        resolver = make_resolver(
            source, cache, clock, {"255": ["07:15", "07:45", "08:15", "08:45", "09:15", "09:45"]}
        )

        resolution = await resolver.resolve("255", "G6")
        await resolver.resolve("255", "G6")

        assert times(resolution) == ["08:15", "08:45", "09:15"]
        assert resolution.note == NOTE_SAMPLE_DATA
        assert len(source.calls) == 2
        assert cache.keys() == set()

    @pytest.mark.asyncio
    async def test_when_sample_exhausted_then_rolls_over_keeping_sample_note(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given it is late, when serving the sample, then tomorrow's first times are marked."""
        clock.now = datetime(2025, 3, 14, 23, 0)
        source = FakeArrivalSource(error=UpstreamEmptyError("empty"))
        resolver = make_resolver(source, cache, clock, {"255": ["07:15", "07:45", "08:15"]})

        resolution = await resolver.resolve("255", "G6")

        assert times(resolution) == ["07:15", "07:45", "08:15"]
        assert all(s.next_day for s in resolution.schedules)
        assert resolution.note == NOTE_SAMPLE_DATA

    @pytest.mark.asyncio
    async def test_when_no_route_matches_then_falls_back(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given arrivals of other routes only, when resolving, then the empty fallback is used."""
        source = FakeArrivalSource([arrival("G1", "08:00")])
        resolver = make_resolver(source, cache, clock)

        resolution = await resolver.resolve("255", "G6")

        assert resolution.schedules == []
        assert resolution.note == NOTE_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_when_unexpected_error_then_absorbed(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given a bug in the source, when resolving, then the caller still gets a resolution."""
        source = FakeArrivalSource(error=KeyError("scheduledDeparture"))
        resolver = make_resolver(source, cache, clock)

        resolution = await resolver.resolve("255", "G6")

        assert resolution.note == NOTE_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_when_upstream_fails_then_cached_key_invalidated(self, clock: FakeClock) -> None:
        """Given a failure, when resolving, then the key of the pair is invalidated."""
        cache = AsyncMock()
        cache.get.return_value = None
        source = FakeArrivalSource(error=UpstreamUnavailableError("down"))
        resolver = make_resolver(source, cache, clock)

        await resolver.resolve("255", "G6")

        cache.invalidate.assert_awaited_once_with("255", "G6")
        cache.put.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_sample_times_sort_last(
        self, cache: InMemoryScheduleCache, clock: FakeClock
    ) -> None:
        """Given a malformed sample entry, when serving the sample, then it never comes first."""
        source = FakeArrivalSource(error=UpstreamUnavailableError("down"))
        resolver = make_resolver(source, cache, clock, {"255": ["bogus", "07:45", "07:15"]})

        resolution = await resolver.resolve("255", "G6")

        assert times(resolution) == ["07:15", "07:45", "bogus"]
