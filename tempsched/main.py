"""Temporary Schedules API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TempSchedError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database manager and service built in the lifespan and kept on app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - build_service() is separate from the lifespan so scripts and tests can
      wire the same object graph around their own DatabaseSessionManager
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tempsched.api.error_handlers import register_error_handlers
from tempsched.api.routes import health, temporary_schedules
from tempsched.config import Settings, get_settings
from tempsched.core.enforce_permission import RequireAuthenticatedUser
from tempsched.infrastructure.database import DatabaseSessionManager
from tempsched.infrastructure.observability import setup_logging
from tempsched.infrastructure.user_lookup import SqlUserExistence
from tempsched.services.schedule_data_store import ScheduleDataStore
from tempsched.services.temporary_schedules import (
    TemporaryScheduleService, utc_now,
)

logger = logging.getLogger(__name__)


def build_service(
    db: DatabaseSessionManager,
    settings: Settings,
    clock: Callable[[], datetime] = utc_now,
) -> TemporaryScheduleService:
    """Wire store, collaborators and service around one session manager."""
    return TemporaryScheduleService(
        store=ScheduleDataStore(db, lock_timeout_ms=settings.lock_timeout_ms),
        users=SqlUserExistence(db),
        authorizer=RequireAuthenticatedUser(),
        settings=settings,
        clock=clock,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.db_manager = db
    app.state.temporary_schedule_service = build_service(db, settings)
    logger.info("Temporary schedules API started")
    yield
    logger.info("Temporary schedules API shutting down")
    await db.dispose()


app = FastAPI(
    title="Temporary Schedules API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(temporary_schedules.router)
register_error_handlers(app)
