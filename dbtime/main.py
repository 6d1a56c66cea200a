"""
DB Time Service: FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       holding its own settings and DatabaseClient on app.state.
Who:   Called by uvicorn (uvicorn dbtime.main:app) and by dbtime.__main__.
When:  Once at server startup; the returned app handles all requests.

Application Layout:
    ┌──────────────────────────────────────────┐
    │                FastAPI App               │
    │                                          │
    │  Routes:          GET /   (only route)   │
    │                                          │
    │  Exception Handlers:                     │
    │    DatabaseError → 500 text/plain        │
    │    Exception     → 500 text/plain        │
    │                                          │
    │  State:  settings, db (DatabaseClient)   │
    └──────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Log database target (password masked) and listen address

    Shutdown:
    1. Dispose the database pool (close all connections)
    2. Log shutdown complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from dbtime import __version__
from dbtime.config import Settings, settings as default_settings
from dbtime.database import DatabaseClient
from dbtime.exceptions import DatabaseError
from dbtime.routes import clock

logger = logging.getLogger(__name__)

GENERIC_ERROR_BODY = "Internal Server Error"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by Docker)
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-statement and per-request noise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Set up logging on startup; dispose the connection pool on shutdown."""
    cfg: Settings = app.state.settings
    db: DatabaseClient = app.state.db

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(cfg.log_level)
    logger.info("DB Time Service %s starting up...", __version__)
    logger.info(
        "Database: %s (pool max %s connections)",
        db.config.masked_url(),
        db.max_connections,
    )
    logger.info("App running at http://%s:%d", cfg.server_host, cfg.server_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("DB Time Service shutting down...")
    await db.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to plain-text HTTP responses.

    Handler hierarchy:
        DatabaseError        → 500, body = error description (or generic body
                               when EXPOSE_ERROR_DETAILS is false)
        Exception (fallback) → 500, generic body, traceback logged
    """

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.warning(
            "Database error on %s %s: %s | Context: %s",
            request.method,
            request.url.path,
            exc.message,
            exc.context,
        )
        expose = request.app.state.settings.expose_error_details
        body = exc.message if expose else GENERIC_ERROR_BODY
        return PlainTextResponse(body, status_code=500)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "Unexpected error on %s %s: %s",
            request.method,
            request.url.path,
            str(exc),
            exc_info=exc,
        )
        return PlainTextResponse(GENERIC_ERROR_BODY, status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to use. Defaults to the module-level
                  settings loaded from the environment.

    Returns:
        FastAPI instance with GET / registered and a DatabaseClient built
        from settings.database_config() on app.state.db.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="DB Time Service",
        version=__version__,
        # GET / is the only route; no docs or schema endpoints
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db = DatabaseClient(
        settings.database_config(),
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=settings.db_pool_pre_ping,
        echo=settings.log_level == "DEBUG",
    )

    register_exception_handlers(app)
    app.include_router(clock.router)

    return app


# uvicorn expects `dbtime.main:app` to be importable
app = create_app()
