"""Selects the arrival source adapter for the configured upstream generation."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from mbus_departures.adapters.config.app_config import AppConfig
from mbus_departures.adapters.otp_api import OtpArrivalSource
from mbus_departures.domain.ports.arrival_source import ArrivalSource

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientSession


def _create_otp_source(config: AppConfig, session: "ClientSession | None") -> ArrivalSource:
    return OtpArrivalSource(
        session=session,
        base_url=config.upstream_base_url,
        timeout_seconds=config.upstream_timeout_seconds,
        client_identifier=config.client_identifier,
        legacy_url_patterns=config.legacy_source_url_patterns,
    )


SOURCE_FACTORIES: dict[str, Callable[[AppConfig, "ClientSession | None"], ArrivalSource]] = {
    "otp": _create_otp_source,
}


def create_arrival_source(
    config: AppConfig, session: "ClientSession | None" = None
) -> ArrivalSource:
    """Create the arrival source named by ``config.upstream_provider``.

    Raises:
        ValueError: If the provider is unknown.
    """
    provider = config.upstream_provider.lower()
    factory = SOURCE_FACTORIES.get(provider)
    if factory is None:
        raise ValueError(
            f"Unknown upstream provider {provider!r}. Known: {', '.join(sorted(SOURCE_FACTORIES))}"
        )
    logger.info(f"Using upstream provider '{provider}' at {config.upstream_base_url}")
    return factory(config, session)
