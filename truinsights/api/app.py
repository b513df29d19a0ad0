"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
routers, and the health endpoint. The module-level ``app`` instance
allows ``uvicorn truinsights.api.app:app --reload``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from truinsights import __version__
from truinsights.api.deps import build_services
from truinsights.api.middleware.error_handler import register_error_handlers
from truinsights.api.routes import auth, insights, journals
from truinsights.core.config import get_settings
from truinsights.core.models import HealthResponse
from truinsights.services.storage.database import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    Startup: create local tables if needed and wire the service container.
    Shutdown: close provider HTTP clients and dispose the DB engine.
    """
    settings = get_settings()
    if settings.backend_provider == "local":
        await init_db()
    if getattr(app.state, "services", None) is None:
        app.state.services = build_services(settings)
    logger.info(
        "TruInsights started (stt=%s, llm=%s, backend=%s)",
        settings.stt_provider,
        settings.llm_provider,
        settings.backend_provider,
    )
    yield
    await app.state.services.aclose()
    await close_db()


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="TruInsights",
        description="Voice journal for fitness classes with transcription "
        "and insight extraction.",
        version=__version__,
        lifespan=lifespan,
    )

    # -- CORS --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check (root-level, not under /api/v1) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__, timestamp=datetime.now(UTC))

    # -- REST routes --
    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(insights.router, prefix="/api/v1")
    app.include_router(journals.router, prefix="/api/v1")

    return app


app = create_app()
