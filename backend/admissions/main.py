"""Cohort Admissions API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map AdmissionsError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database opened on startup and disposed on shutdown via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from admissions.api.error_handlers import register_error_handlers
from admissions.api.routes import admissions, events, health, review
from admissions.config import get_settings
from admissions.infrastructure.database import close_db, init_db
from admissions.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Admissions API started")
    yield
    await close_db()
    logger.info("Admissions API shutting down")


app = FastAPI(
    title="Cohort Admissions API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(review.router)
app.include_router(admissions.router)
app.include_router(events.router)

register_error_handlers(app)
