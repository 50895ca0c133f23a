"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from shortener import RedirectResolver, ShortCodeGenerator, URLShortenerService, __version__
from shortener.common import get_logger
from shortener.database import RedisCache, URLStore, get_store
from shortener.errors import ShortCodeNotFoundError, ShortenerError
from shortener.metrics import ShortenerMetrics

from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware
from .middleware.metrics import MetricsMiddleware

INTERNAL_ERROR_MESSAGE = "Something went wrong"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the cache on startup; release connections on shutdown."""
    logger = app.state.logger

    if app.state.cache:
        await app.state.cache.connect()

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL shortener service...")
    await app.state.service.close()
    logger.info("Service stopped")


def create_app(
    config,
    store: Optional[URLStore] = None,
    cache: Optional[RedisCache] = None,
    metrics: Optional[ShortenerMetrics] = None,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: Configuration instance
        store: Store instance (built from config when omitted)
        cache: Optional cache instance (built from config.redis_url when omitted)
        metrics: Metrics container (a fresh registry when omitted)
        logger: Optional logger

    Returns:
        Configured FastAPI app
    """
    logger = logger or get_logger()
    if metrics is None:
        metrics = ShortenerMetrics()
    if store is None:
        store = get_store(config, logger=logger)

    if cache is None and config.redis_url:
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )

    service = URLShortenerService(
        store=store,
        cache=cache,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        metrics=metrics,
        logger=logger,
        enable_custom_codes=config.enable_custom_codes,
        max_collision_retries=config.max_collision_retries,
    )
    resolver = RedirectResolver(store=store, cache=cache, metrics=metrics, logger=logger)

    app = FastAPI(
        title="URL Shortener",
        description="Short link creation and redirect service",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    # Store instances in app state for access in routes
    app.state.config = config
    app.state.logger = logger
    app.state.metrics = metrics
    app.state.store = store
    app.state.cache = cache
    app.state.service = service
    app.state.resolver = resolver

    app.add_middleware(MetricsMiddleware, metrics=metrics)
    app.add_middleware(LoggingMiddleware, logger=get_logger("shortener.web"))

    @app.exception_handler(ShortenerError)
    async def handle_shortener_error(request: Request, exc: ShortenerError):
        if isinstance(exc, ShortCodeNotFoundError):
            return Response(status_code=config.not_found_status_code)

        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"{type(exc).__name__}: {exc}")
            return JSONResponse(status_code=exc.status_code, content=INTERNAL_ERROR_MESSAGE)

        return JSONResponse(status_code=exc.status_code, content=str(exc))

    app.include_router(web_router, tags=["Operations"])
    app.include_router(api_router, prefix="/api", tags=["API"])

    return app
