"""
MealPlanner FastAPI Application
Main entry point wiring routes, middleware, exception handlers and outbound adapters
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio
import inspect
from typing import Optional

from api.routes import (
    calendar,
    feedback,
    grocery,
    health,
    household,
    instacart,
    pantry,
    plans,
    preferences,
    pricing,
    recipes,
    shopping,
    users,
)

# Import database and adapters
from domain.models import init_database
from adapters import ALL_ADAPTERS

# Import configuration
from app.config import settings

# Import middleware
from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    service_validation_exception_handler,
    not_found_exception_handler,
    conflict_exception_handler,
    external_service_exception_handler,
    rate_limit_exception_handler,
    general_exception_handler,
)
from app.exceptions import (
    ServiceValidationError,
    NotFoundError,
    ConflictError,
    ExternalServiceError,
    RateLimitError,
)

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("mealplanner.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup and shutdown.
    Creates the schema with retries, then opens the outbound HTTP clients.
    """
    is_coro_fn = inspect.iscoroutinefunction(init_database)
    last_exc: Optional[Exception] = None

    _logger.info(f"Starting MealPlanner in {settings.environment.value} mode")

    for attempt in range(1, settings.db_init_attempts + 1):
        try:
            if is_coro_fn:
                await init_database()
            else:
                # Run blocking init in a thread to avoid blocking the event loop
                await anyio.to_thread.run_sync(init_database)

            _logger.info("Database initialization succeeded")
            break
        except Exception as exc:
            last_exc = exc
            _logger.warning(
                "Database init attempt %d/%d failed: %s",
                attempt,
                settings.db_init_attempts,
                exc,
            )
            if attempt < settings.db_init_attempts:
                await anyio.sleep(settings.db_init_delay_sec)
            else:
                _logger.error(
                    "Database initialization failed after %d attempts", attempt
                )
                raise

    # Outbound clients (best-effort; each adapter reconnects lazily on first use)
    for adapter in ALL_ADAPTERS:
        name = adapter.__name__.rsplit(".", 1)[-1]
        try:
            adapter.connect()
            _logger.info("%s client ready", name)
        except Exception as e:
            _logger.warning("Failed to initialize %s; continuing without it: %s", name, e)

    try:
        yield
    finally:
        _logger.info("Shutting down MealPlanner")
        for adapter in ALL_ADAPTERS:
            try:
                adapter.close()
            except Exception as e:
                _logger.exception("Error closing %s during shutdown: %s", adapter.__name__, e)


# Create FastAPI application with enhanced configuration
app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description=settings.api_description,
    lifespan=lifespan,
    debug=settings.debug,
    openapi_url=(
        f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
    ),
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
    redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# Register exception handlers (most specific class wins)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(ServiceValidationError, service_validation_exception_handler)
app.add_exception_handler(NotFoundError, not_found_exception_handler)
app.add_exception_handler(ConflictError, conflict_exception_handler)
app.add_exception_handler(ExternalServiceError, external_service_exception_handler)
app.add_exception_handler(RateLimitError, rate_limit_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

for module in (
    health,
    users,
    household,
    pantry,
    recipes,
    plans,
    grocery,
    feedback,
    calendar,
    preferences,
    pricing,
    shopping,
    instacart,
):
    app.include_router(module.router, prefix=settings.api_prefix)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
