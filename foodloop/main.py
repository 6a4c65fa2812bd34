"""FoodLoop API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map FoodLoopError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py to keep this module's imports small
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import foodloop.infrastructure.database as database
from foodloop.api.error_handlers import register_error_handlers
from foodloop.api.routes import (
    donation_requests, health, impact, listings, reports,
)
from foodloop.config import get_settings
from foodloop.infrastructure.observability import setup_logging

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
    logger.info("FoodLoop API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("FoodLoop API shutting down")


app = FastAPI(
    title="FoodLoop API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes - explicit registration
app.include_router(health.router)
app.include_router(listings.router)
app.include_router(donation_requests.router)
app.include_router(reports.router)
app.include_router(impact.router)

register_error_handlers(app)
