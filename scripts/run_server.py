"""Serve the GameDay coach API with uvicorn."""
from __future__ import annotations

import argparse
import logging

import uvicorn

from gameday.config import get_settings
from gameday.logging_config import configure_logging


logger = logging.getLogger("server")


def serve(host: str | None = None, port: int | None = None, reload: bool = False) -> None:
    """Run the API, defaulting host and port to the configured values."""
    settings = get_settings()
    host = host or settings.app_host
    port = port or settings.app_port

    logger.info("Starting GameDay coach API on %s:%d", host, port)
    uvicorn.run("gameday.main:app", host=host, port=port, reload=reload, log_config=None)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the GameDay coach API server")
    parser.add_argument("--host", help="Bind address (defaults to APP_HOST)")
    parser.add_argument("--port", type=int, help="Bind port (defaults to APP_PORT)")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    configure_logging()
    serve(host=args.host, port=args.port, reload=args.reload)
