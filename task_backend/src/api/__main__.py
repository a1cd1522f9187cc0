"""
Run the API with uvicorn.

Usage:
    python -m src.api

Listens on HOST:PORT from the environment (0.0.0.0:3001 by default). If the
port cannot be bound uvicorn logs the error and the process exits.
"""
from __future__ import annotations

import logging

import uvicorn

from .logging_setup import setup_logging
from .main import create_app
from .settings import get_settings

logger = logging.getLogger("src.api")


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = create_app(settings)
    base_url = f"http://localhost:{settings.port}"
    logger.info("Demo Task Manager API listening on %s", base_url)
    logger.info("API info:     %s/api", base_url)
    logger.info("Health check: %s/api/health", base_url)
    logger.info("Protected routes use header: x-api-key: %s", settings.api_key)

    # log_config=None keeps uvicorn on the root handler configured above
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
