"""Gig Marketplace API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map MarketplaceError → structured JSON responses
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

from gigmarket.api.error_handlers import register_error_handlers
from gigmarket.api.routes import applications, auth, gigs, health, profile, reviews
from gigmarket.config import get_settings
from gigmarket.infrastructure import database
from gigmarket.infrastructure.observability import setup_logging

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
    logger.info("Gig Marketplace API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Gig Marketplace API shutting down")


app = FastAPI(
    title="Gig Marketplace API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(gigs.router)
app.include_router(applications.router)
app.include_router(reviews.router)

register_error_handlers(app)
