#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: a single uvicorn worker serves many connections via async I/O.
Set WORKERS > 1 for multi-process scaling; the in-memory store is per
process, so multi-worker deployments need STORAGE_BACKEND=postgres.

Usage:
    python app.py

Environment variables:
    STORAGE_BACKEND - 'memory' (default) or 'postgres'
    DATABASE_URL - PostgreSQL connection URL
    DATABASE_CREATE_TABLES - Set to 'true' to create the table on startup
    REDIS_URL - Redis connection URL (optional redirect cache)
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level

Uvicorn is started with log_config=None so its loggers keep the handlers
installed by setup_logging.
"""

import signal
import sys

import uvicorn
from fastapi import FastAPI

from config import load_config
from shortener import __version__
from shortener.common.logging_config import setup_logging
from shortener.metrics import ShortenerMetrics
from web_app import create_app


def build_app() -> FastAPI:
    """Load configuration, set up logging and build the application."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    if config.workers > 1 and config.storage_backend == "memory":
        logger.warning("In-memory store with multiple workers: short codes are not shared between processes")

    metrics = ShortenerMetrics()
    metrics.set_workers(config.workers)

    return create_app(config=config, metrics=metrics, logger=logger)


def main():
    """Main entry point."""
    config = load_config()
    log_level = config.log_level.lower()

    if config.workers > 1:
        # Multiple processes need an import string; each worker builds its own app
        uvicorn.run(
            "app:build_app",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=log_level,
            log_config=None,
        )
        return

    app = build_app()
    logger = app.state.logger

    logger.info(f"URL shortener {__version__} (storage={config.storage_backend}, cache={'on' if config.redis_url else 'off'})")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url', 'redis_url'})}")

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=log_level,
        log_config=None,
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Signal {signum} received, stopping server")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Listening on {config.host}:{config.port}")
        server.run()
    except OSError as e:
        logger.error(f"Could not start server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
