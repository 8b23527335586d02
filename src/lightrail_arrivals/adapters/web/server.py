"""Uvicorn-hosted web server for the HTTP front."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import uvicorn

from lightrail_arrivals.adapters.web.app import create_app

if TYPE_CHECKING:
    from lightrail_arrivals.adapters.config import AppConfig
    from lightrail_arrivals.domain.ports import RoutesProvider

logger = logging.getLogger(__name__)


class WebServer:
    """Serves the routes endpoint until stopped."""

    def __init__(self, routes_provider: RoutesProvider, config: AppConfig) -> None:
        """Initialize the web server.

        Args:
            routes_provider: Source of the routes snapshot.
            config: Application configuration.
        """
        self.routes_provider = routes_provider
        self.config = config
        self._server: uvicorn.Server | None = None

    async def start(self) -> None:
        """Build the application and serve it; returns when the server exits."""
        app = create_app(self.routes_provider, self.config)
        server_config = uvicorn.Config(
            app,
            host=self.config.host,
            port=self.config.port,
            timeout_keep_alive=self.config.idle_timeout_seconds,
            log_level=self.config.log_level.lower(),
        )
        self._server = uvicorn.Server(server_config)

        logger.info(f"Server running on http://{self.config.host}:{self.config.port}")
        logger.info("Available endpoints:")
        logger.info("  GET /routes - light rail route data with next arrival times")
        logger.info("  GET /healthz - liveness probe")
        await self._server.serve()

    async def stop(self) -> None:
        """Ask the server to exit."""
        if self._server:
            self._server.should_exit = True
