from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, Optional
import time
import uuid

import httpx
from fastapi import FastAPI, Request

from flight_aggregator.adapters.factory import build_vendor_pipelines
from flight_aggregator.api.error_handlers import register_exception_handlers
from flight_aggregator.core.config import Settings, get_settings, load_env_file
from flight_aggregator.core.logging import configure_logging, get_logger, set_correlation_id
from flight_aggregator.infrastructure.cache import create_cache
from flight_aggregator.services.aggregation_service import FlightAggregationService


# Load environment variables early
load_env_file()
logger = get_logger(__name__)


def build_lifespan(settings: Settings) -> Callable[[FastAPI], AsyncContextManager[None]]:
    """
    Startup and shutdown hooks for the shared clients.

    Opens one HTTP client for every vendor and the configured cache, builds
    the aggregation service on ``app.state`` and closes both on shutdown.
    A service placed on ``app.state`` beforehand is used as-is.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting up Flight Aggregator")

        if getattr(app.state, "aggregation_service", None) is not None:
            yield
            logger.info("Shutting down Flight Aggregator")
            return

        async with httpx.AsyncClient(timeout=settings.VENDOR_TIMEOUT) as http_client:
            cache = create_cache(settings)
            app.state.aggregation_service = FlightAggregationService(
                build_vendor_pipelines(settings, http_client),
                cache,
                policy=settings.VENDOR_FAILURE_POLICY,
                cache_ttl=settings.CACHE_TTL,
                live_update_interval=settings.LIVE_UPDATE_INTERVAL,
            )
            try:
                yield
            finally:
                logger.info("Shutting down Flight Aggregator")
                await cache.close()
                app.state.aggregation_service = None

    return lifespan


def create_application(
    settings: Optional[Settings] = None,
    service: Optional[FlightAggregationService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Missing vendor credentials make ``get_settings`` raise, so the
    application refuses to start.

    Args:
        settings: Settings to use instead of the environment
        service: Prebuilt aggregation service, skips client setup

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or get_settings()
    configure_logging(settings)

    # Create FastAPI app with metadata
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
        debug=settings.DEBUG,
        lifespan=build_lifespan(settings),
    )
    app.state.aggregation_service = service

    # Register middleware
    configure_middleware(app)

    # Register exception handlers
    register_exception_handlers(app)

    # Register routers
    register_routers(app, settings)

    return app


def configure_middleware(app: FastAPI) -> None:
    """
    Configure middleware components for the FastAPI application.

    Args:
        app: FastAPI application instance
    """

    # Request tracking middleware
    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next: Callable):
        # Extract or generate correlation ID
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        # Track request timing
        start_time = time.time()

        response = await call_next(request)

        # Add correlation ID to response headers
        response.headers["X-Correlation-ID"] = correlation_id

        process_time = time.time() - start_time
        logger.info(
            "Request completed",
            extra={"data": {
                "request_path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "process_time_ms": round(process_time * 1000, 2)
            }}
        )

        return response


def register_routers(app: FastAPI, settings: Settings) -> None:
    """
    Register API routers with the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    # Import routers here to avoid circular imports
    from flight_aggregator.api.routes.flights import flights_router
    from flight_aggregator.api.routes.health import health_router

    app.include_router(
        health_router,
        prefix=f"{settings.API_V1_STR}/health",
        tags=["Health"]
    )

    app.include_router(
        flights_router,
        prefix=f"{settings.API_V1_STR}/flights",
        tags=["Flights"]
    )


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run("flight_aggregator.main:create_application", factory=True, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
