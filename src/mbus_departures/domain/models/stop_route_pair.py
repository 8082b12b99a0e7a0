"""Stop/route pair domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StopRoutePair:
    """Identifies one upstream query target: a route observed at a stop."""

    stop_id: str
    route: str

    @property
    def cache_key(self) -> str:
        """Key under which resolutions of this pair are cached."""
        return f"{self.stop_id}-{self.route}"
