"""FastAPI application factory and the ``riskcheck-server`` entry point.

``create_app()`` wires:
  - a lifespan that loads the question catalog, builds the IntakeController
    and (optionally) creates tables at startup, then disposes the engine
  - CORS middleware
  - the SDK error taxonomy mapped onto HTTP statuses (see ``errors.py``)
  - the versioned API under ``/api/v1`` and an unversioned ``/health`` probe
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from riskcheck_db.engine import create_tables, dispose_engine, get_engine
from riskcheck_rulesets.catalog import QuestionCatalog
from riskcheck_rulesets.errors import NotFound, PersistenceError, ValidationError
from riskcheck_rulesets.intake import IntakeController
from riskcheck_rulesets.scoring import ScoringEngine

from riskcheck_server.config import ServerSettings, load_settings
from riskcheck_server.errors import (
    generic_error_handler,
    not_found_handler,
    persistence_error_handler,
    validation_error_handler,
)
from riskcheck_server.routes import register_routes

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the catalog once per process and release the pool on shutdown."""
    settings: ServerSettings = app.state.settings

    catalog = QuestionCatalog(catalog_dir=settings.catalog_dir)
    catalog.load()
    scoring = ScoringEngine(
        catalog,
        medium_threshold=settings.medium_risk_threshold,
        high_threshold=settings.high_risk_threshold,
    )
    controller = IntakeController(catalog, scoring=scoring)
    logger.info(
        "Serving catalog %s (thresholds: medium=%s, high=%s)",
        catalog.version,
        controller.scoring.medium_threshold,
        controller.scoring.high_threshold,
    )
    app.state.catalog = catalog
    app.state.controller = controller

    if settings.auto_create_tables:
        await create_tables()
        logger.warning("SERVER_AUTO_CREATE_TABLES is set; schema created from ORM metadata")

    try:
        yield
    finally:
        await dispose_engine()
        logger.info("Database engine disposed")


# ------------------------------------------------------------------
# Health probe (unversioned)
# ------------------------------------------------------------------

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
async def health() -> dict:
    """Readiness probe: the catalog is loaded and the database answers."""
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Health check failed: %s", exc)
        return {"status": "error", "detail": "database unavailable"}
    return {"status": "ok"}


def _install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)


def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build the configured FastAPI application."""
    settings = settings or load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
    )

    app = FastAPI(
        title="Risk Check API",
        description="Health risk questionnaire: branching intake, scoring, and session history",
        version="0.1.0",
        lifespan=lifespan,
    )
    # Read by the lifespan handler and by request dependencies
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_error_handlers(app)

    app.include_router(health_router)
    register_routes(app)
    return app


# ASGI target for ``uvicorn riskcheck_server.app:app``
app = create_app()


def cli() -> None:
    """Console-script entry point: ``riskcheck-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "riskcheck_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
