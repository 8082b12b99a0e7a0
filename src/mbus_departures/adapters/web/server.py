"""Uvicorn server wrapper for the schedule API."""

import logging
from typing import TYPE_CHECKING

import uvicorn

if TYPE_CHECKING:
    from starlette.applications import Starlette

    from mbus_departures.adapters.config.app_config import AppConfig

logger = logging.getLogger(__name__)


class ScheduleApiServer:
    """Serves the schedule API until stopped."""

    def __init__(self, app: "Starlette", config: "AppConfig") -> None:
        """Initialize with the ASGI app and the app config."""
        self.app = app
        self.config = config
        self._server: uvicorn.Server | None = None

    async def start(self) -> None:
        """Start the web server and serve until it exits."""
        server_config = uvicorn.Config(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower(),
        )
        self._server = uvicorn.Server(server_config)
        logger.info(f"Serving schedule API on {self.config.host}:{self.config.port}")
        await self._server.serve()

    async def stop(self) -> None:
        """Stop the web server."""
        if self._server:
            self._server.should_exit = True
