"""
FastAPI application for Family Calendar.

This is the main entry point for the HTTP API, providing:
- Family event endpoints (list, create, delete)
- Health endpoint
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.dependencies import close_calendar_repository, init_calendar_repository
from src.api.event_routes import router as event_router
from src.api.middleware import RequestLoggingMiddleware
from src.api.models import HealthResponse
from src.api.response_builder import build_error_response
from src.auth import install_session_middleware
from src.config import get_settings
from src.database import dispose_engine, init_db
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

settings = get_settings()


# =============================================================================
# Application Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    setup_logging()
    logger.info("Starting Family Calendar API")
    if settings.database_auto_create:
        await init_db()
    init_calendar_repository(app, settings)
    logger.info("Family Calendar API started")

    yield

    # Shutdown
    logger.info("Shutting down Family Calendar API")
    close_calendar_repository(app)
    await dispose_engine()


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="Family Calendar API",
    description="""
# Family Calendar API

Shared calendar for a family. Events are stored locally and mirrored to the
family's Google Calendar.

## Endpoints
- **GET /events** - Family, members and events of the signed-in user
- **POST /events** - Book an event for a family member
- **DELETE /events/{event_id}** - Delete an event (creator or owner only)

## Response Format

Every event endpoint returns `{statusCode, status, message, data?}`.

- **200 / 201** - Success
- **400** - The caller already has an event in the requested interval
- **401** - No authenticated session
- **403** - Not allowed to delete this event
- **404** - No family, family missing, or event missing
- **422** - Invalid payload
- **500** - `Database Error: ...` or `Google Calendar Error: ...`
    """,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add middleware (the last one added runs first)
install_session_middleware(app, settings)
app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(event_router)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions, including router 404/405s, with the standard envelope."""
    return build_error_response(exc.status_code, str(exc.detail), headers=exc.headers)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions, keeping the underlying message."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return build_error_response(500, str(exc))


# =============================================================================
# Health & Status Endpoints
# =============================================================================


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    tags=["System"],
)
async def health_check(request: Request) -> HealthResponse:
    """
    Check API health status.

    Returns:
        Health status including calendar repository status
    """
    calendar_ready = getattr(request.app.state, "calendar_repository", None) is not None

    return HealthResponse(
        status="healthy" if calendar_ready else "unhealthy",
        version=API_VERSION,
        calendar_ready=calendar_ready,
    )


# =============================================================================
# Run with Uvicorn
# =============================================================================


def run_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False):
    """Run the API server with Uvicorn."""
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    run_server(host=settings.api_host, port=settings.api_port, reload=settings.api_reload)
