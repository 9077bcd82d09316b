"""Entry point for the LY loyalty API.

Starts the FastAPI application with Uvicorn.  Host and port are read
from the ``HOST`` and ``PORT`` environment variables (defaults
``0.0.0.0`` and ``3000``); see ``loyalty_api/app/core/config.py`` for
the other supported variables.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from loyalty_api.app.core.config import settings
from loyalty_api.app.main import app


async def run_api() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        access_log=False,
    )
    server = Server(config)
    logging.getLogger(__name__).info(
        "Starting %s on %s:%s (%s)", settings.project_name, settings.host, settings.port, settings.environment
    )
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
