"""Journey group domain model."""

from dataclasses import dataclass, field

from mbus_departures.domain.models.stop_route_pair import StopRoutePair


@dataclass(frozen=True)
class JourneyGroup:
    """A named set of stop/route pairs representing one travel intent.

    Owned by the pinned-group store; the engine only reads it.
    """

    id: str
    name: str
    stops: list[StopRoutePair] = field(default_factory=list)
    description: str | None = None
