"""Library API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - The action table is built (and checked for ambiguity) before the app serves
    - Global error handlers map LibraryError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers registered from api/error_handlers.py to keep this module small
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from library_api.api.error_handlers import register_error_handlers
from library_api.api.routes import health, resources
from library_api.config import get_settings
from library_api.infrastructure import database
from library_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Library API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Library API shutting down")


app = FastAPI(
    title="Library API", version="1.0.0", lifespan=lifespan,
)

# CORS: configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location", "ETag", resources.SUPPORTED_VERSIONS_HEADER],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(resources.create_router())

register_error_handlers(app)
