"""
FastAPI application entry point.

This module creates and configures the FastAPI application using an
application factory (create_app), so tests can build an app against
different settings.

For local development:
    FIRESTORE_MOCK_MODE=true uvicorn coachboard.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.routes import app as app_routes
from .api.routes import coach, health, student
from .config.settings import get_settings

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=get_settings().log_level.upper(),
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Logs startup and shutdown and validates configuration. The store is
    connected lazily by the first request that needs it.
    """
    # Startup
    settings = get_settings()

    logger.info(
        "Coachboard API starting",
        extra={
            "version": __version__,
            "app_id": settings.app_id,
            "mock_mode": settings.firestore_mock_mode,
        }
    )

    # Validate configuration
    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )
        # Opening an app session will land on the error screen

    yield

    # Shutdown
    logger.info("Coachboard API shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Coaching programs for a coach and their students.

        ## Workflow

        1. **Open an app session**: `POST /api/v1/app`
           - Returns a `session_id` and the login screen

        2. **Log in**: `POST /api/v1/app/{session_id}/login`
           - Coach logins open the admin screen, students their dashboard

        3. **Drive the screens**: every command returns the next screen view
           - Students browse folders, run sessions and log sets
           - Coaches edit programs, the exercise lexicon and track progress
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    # Configure allowed origins via CORS_ORIGINS environment variable
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        app_routes.router,
        prefix="/api/v1/app",
        tags=["App session"],
    )

    app.include_router(
        student.router,
        prefix="/api/v1/app",
        tags=["Student"],
    )

    app.include_router(
        coach.router,
        prefix="/api/v1/app",
        tags=["Coach"],
    )

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "Coachboard API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        Store failures during a command end up here. We log the full error
        server-side but return a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error. Please contact support if this persists."
            }
        )

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn imports
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "coachboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
