"""Main entry point for the MBus departures API server."""

import asyncio
import logging
import sys

import aiohttp

from mbus_departures.adapters.config import AppConfig, JourneyGroupLoader
from mbus_departures.adapters.web import ScheduleApiServer, create_app
from mbus_departures.composition import create_engine
from mbus_departures.domain.models import JourneyGroup

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once per process."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def load_groups(config: AppConfig) -> list[JourneyGroup]:
    """Load the pinned journey groups, or none if no config file is set."""
    if not config.config_file:
        logger.info("No config file set; serving ad-hoc queries only")
        return []
    groups = JourneyGroupLoader.load(config)
    logger.info(f"Loaded {len(groups)} journey group(s):")
    for group in groups:
        logger.info(f"  - '{group.name}' with {len(group.stops)} stop/route pair(s)")
    return groups


async def main() -> None:
    """Main application entry point."""
    try:
        config = AppConfig()
    except ValueError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)
    configure_logging(config.log_level)

    try:
        groups = load_groups(config)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid journey group configuration: {e}")
        sys.exit(1)

    # One HTTP session for all upstream requests
    async with aiohttp.ClientSession() as session:
        engine = create_engine(config, session)
        app = create_app(engine.resolver, engine.aggregator, groups)
        server = ScheduleApiServer(app, config)

        try:
            await server.start()
        except KeyboardInterrupt:
            logger.info("Shutting down...")
            await server.stop()


if __name__ == "__main__":
    asyncio.run(main())
