"""
Main FastAPI application for the Synoptic Observation Desk.

This module contains the main FastAPI application instance and root endpoint.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from obsdesk import __version__
from obsdesk.config import settings
from obsdesk.core.errors import register_error_handlers
from obsdesk.routers.agro import router as agro_router
from obsdesk.routers.auth import router as auth_router
from obsdesk.routers.daily_summary import router as daily_summary_router
from obsdesk.routers.drafts import router as drafts_router
from obsdesk.routers.logs import router as logs_router
from obsdesk.routers.observations import router as observations_router
from obsdesk.routers.stations import router as stations_router
from obsdesk.routers.status import router as status_router
from obsdesk.routers.synoptic_code import router as synoptic_code_router
from obsdesk.routers.time_check import router as time_check_router
from obsdesk.routers.users import router as users_router
from obsdesk.services.draft_store import create_draft_store
from obsdesk.utils.logging_config import get_logger, setup_logging
from obsdesk.utils.rate_limit import DEFAULT_LIMIT, limiter

# Import all models to ensure SQLAlchemy relationships are properly configured
import obsdesk.models  # noqa: F401 - triggers import of all model classes

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown events.

    Note: Database tables are managed through Alembic migrations.
    Run `alembic upgrade head` to create/update database tables.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("Synoptic Observation Desk - Application starting up")
    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"API Version: {settings.API_V1_STR}")
    logger.info(f"Database: {settings.SQLALCHEMY_DATABASE_URI.split('://')[0]}")
    logger.info(f"Draft store: {type(app.state.draft_store.backend).__name__}")
    logger.info("=" * 60)
    logger.warning("Remember to run 'alembic upgrade head' to apply database migrations")

    yield

    # Shutdown
    logger.info("=" * 60)
    logger.info("Synoptic Observation Desk - Application shutting down")
    logger.info("=" * 60)


app = FastAPI(
    title="Synoptic Observation Desk API",
    description="Station data entry, observation slot bookkeeping and daily synoptic summaries",
    version=__version__,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Domain errors -> {"detail", "status_code"} responses
register_error_handlers(app)

# Form drafts shared by every request
app.state.draft_store = create_draft_store()

# Set up CORS
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.get("/")
@limiter.limit(DEFAULT_LIMIT)
async def root(request: Request):
    """
    Root endpoint returning API information.
    """
    return {
        "message": "Welcome to the Synoptic Observation Desk API",
        "version": __version__,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
@limiter.limit("60/minute")  # More generous limit for health checks
async def health_check(request: Request):
    """
    Health check endpoint.

    Rate limit: 60 requests per minute
    """
    return {"status": "healthy"}


# Include routers
app.include_router(auth_router, prefix=settings.API_V1_STR)
app.include_router(status_router, prefix=settings.API_V1_STR)
app.include_router(stations_router, prefix=settings.API_V1_STR)
app.include_router(time_check_router, prefix=settings.API_V1_STR)
app.include_router(observations_router, prefix=settings.API_V1_STR)
app.include_router(daily_summary_router, prefix=settings.API_V1_STR)
app.include_router(synoptic_code_router, prefix=settings.API_V1_STR)
app.include_router(agro_router, prefix=settings.API_V1_STR)
app.include_router(users_router, prefix=settings.API_V1_STR)
app.include_router(logs_router, prefix=settings.API_V1_STR)
app.include_router(drafts_router, prefix=settings.API_V1_STR)
