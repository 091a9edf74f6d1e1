"""FastAPI application for the liftbook API."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from .. import __version__
from ..config import Settings, get_settings
from ..db.engine import Database, init_db, seed_catalog
from ..errors import (
    Conflict,
    DatabaseUnavailable,
    LiftbookError,
    NotFound,
    ReconciliationFailed,
    ValidationRejected,
)
from ..log import setup_logger
from .routers import active_program, catalog, programs, progress, users, workouts

ERROR_STATUS = {
    ValidationRejected: 400,
    NotFound: 404,
    Conflict: 409,
    DatabaseUnavailable: 503,
    ReconciliationFailed: 500,
}


def status_for(error: LiftbookError) -> int:
    """HTTP status for an error, matching on the most specific class first."""
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 500


async def handle_liftbook_error(request: Request, exc: LiftbookError) -> JSONResponse:
    """Render a liftbook error as JSON."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}")
    body = {"error": type(exc).__name__, "detail": str(exc)}
    return JSONResponse(status_code=status_code, content=body)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - opens the database on startup."""
    if getattr(app.state, "db", None) is None:
        settings: Settings = app.state.settings
        db = Database.from_settings(settings)
        is_new = not db.exists
        # Idempotent; also adds tables missing from an older database
        await init_db(db)
        if is_new:
            await seed_catalog(db)
        app.state.db = db
    yield


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to the environment
        database: An already opened database; when omitted one is created
            from settings at startup
    """
    settings = settings or get_settings()
    setup_logger(level=settings.log_level, log_file=settings.log_file)

    app = FastAPI(
        title="liftbook",
        description="Training programs, workouts, exercises and sets",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = database

    app.add_exception_handler(LiftbookError, handle_liftbook_error)

    # Include routers
    app.include_router(users.router)
    app.include_router(programs.router)
    app.include_router(catalog.router)
    app.include_router(active_program.router)
    app.include_router(workouts.router)
    app.include_router(progress.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
