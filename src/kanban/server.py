"""
Run the board API with uvicorn.

Usage:
    python -m src.kanban.server

Bind address, port, persistence backend and log level come from the
environment (see settings.py).
"""
from __future__ import annotations

import logging

import uvicorn

from .logging_config import setup_logging
from .main import create_app
from .settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = create_app(settings)
    logger.info(
        "Server starting on http://%s:%d/api (backend: %s)",
        settings.host,
        settings.port,
        settings.persistence_backend,
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
