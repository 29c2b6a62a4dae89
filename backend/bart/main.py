"""BART API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map BartError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Logging configured on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern
    - Static files mounted after API routes so /api/v1/* takes precedence
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from bart.api.error_handlers import register_error_handlers
from bart.api.routes import game_session, health
from bart.config import get_settings
from bart.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("BART API started")
    yield
    logger.info("BART API shutting down")


app = FastAPI(title="BART API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(game_session.router)

register_error_handlers(app)

# Serves the game front-end build when present (html=True: SPA fallback)
if os.path.isdir("static"):
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
