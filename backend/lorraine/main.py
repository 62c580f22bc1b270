"""Lorraine API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map LorraineError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized and schema created on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Schema via metadata.create_all: tables are derived from the ORM models,
      and trust_states can always be rebuilt from the event tables
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import lorraine.infrastructure.database as database
from lorraine.infrastructure.observability import setup_logging
from lorraine.config import get_settings
from lorraine.api.error_handlers import register_error_handlers
from lorraine.api.routes import health, graph, trust, retractions, diagnostics

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = database.init_db(settings.database_url, echo=settings.database_echo)
    await manager.create_schema()
    logger.info("Lorraine API started")
    yield
    await manager.dispose()
    logger.info("Lorraine API shutting down")


app = FastAPI(
    title="Lorraine Trust Engine", version="1.0.0", lifespan=lifespan,
)

# CORS: origins come from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(graph.router)
app.include_router(trust.router)
app.include_router(retractions.router)
app.include_router(diagnostics.router)

register_error_handlers(app)
