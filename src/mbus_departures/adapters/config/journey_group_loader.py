"""Journey group loader."""

import logging
from typing import Any

from mbus_departures.adapters.config.app_config import AppConfig
from mbus_departures.domain.models import JourneyGroup, StopRoutePair

logger = logging.getLogger(__name__)


def _parse_pair(pair_data: Any) -> StopRoutePair | None:
    """Parse a {stop_id, route} table; camelCase ``stopId`` is accepted too."""
    if not isinstance(pair_data, dict):
        return None
    stop_id = str(pair_data.get("stop_id") or pair_data.get("stopId") or "").strip()
    route = str(pair_data.get("route") or "").strip()
    if not stop_id or not route:
        return None
    return StopRoutePair(stop_id=stop_id, route=route)


def parse_journey_group(group_data: Any) -> JourneyGroup | None:
    """Parse one group in the multi-pair schema.

    Groups still in the legacy single-pair schema are rejected; migrating them
    is the responsibility of the group store.
    """
    if not isinstance(group_data, dict):
        return None

    group_id = str(group_data.get("id") or "").strip()
    if not group_id:
        logger.warning(f"Skipping journey group without id: {group_data}")
        return None

    stops_data = group_data.get("stops")
    if not isinstance(stops_data, list):
        logger.warning(f"Skipping journey group '{group_id}': 'stops' must be a list of pairs")
        return None

    stops = []
    for pair_data in stops_data:
        pair = _parse_pair(pair_data)
        if pair is None:
            logger.warning(f"Skipping invalid stop/route pair in group '{group_id}': {pair_data}")
            continue
        stops.append(pair)

    description = group_data.get("description")
    return JourneyGroup(
        id=group_id,
        name=str(group_data.get("name") or group_id),
        stops=stops,
        description=str(description) if description else None,
    )


class JourneyGroupLoader:
    """Loads journey groups from app config."""

    @staticmethod
    def load(config: AppConfig) -> list[JourneyGroup]:
        """Load journey groups from the TOML file of the app config."""
        groups: list[JourneyGroup] = []
        seen_ids: set[str] = set()
        for group_data in config.get_groups_config():
            group = parse_journey_group(group_data)
            if group is None:
                continue
            if group.id in seen_ids:
                raise ValueError(f"Journey group ids must be unique. Duplicate id: {group.id}")
            seen_ids.add(group.id)
            groups.append(group)
        return groups
