"""FastAPI application with lifespan management."""

from __future__ import annotations

import importlib.metadata
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from clarity_canvas.api.middleware.error_handler import register_error_handlers
from clarity_canvas.api.routes import health, profiles, sessions
from clarity_canvas.core.config import APIConfig, AppSettings
from clarity_canvas.core.startup_checks import validate_settings
from clarity_canvas.hooks import setup_logging
from clarity_canvas.services import build_services


def _get_version() -> str:
    """Read package version from installed metadata, with dev fallback."""
    try:
        return importlib.metadata.version("clarity-canvas")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup/shutdown lifecycle."""
    settings = AppSettings()
    validate_settings(settings)
    setup_logging(settings.observability)

    app.state.settings = settings
    app.state.services = build_services(settings)
    yield


def create_app(lifespan_handler=lifespan) -> FastAPI:
    """Build the app; tests pass their own lifespan to inject services."""
    api_config = APIConfig()
    application = FastAPI(
        title=api_config.title,
        description=api_config.description,
        version=_get_version(),
        lifespan=lifespan_handler,
    )
    register_error_handlers(application)
    application.include_router(health.router)
    application.include_router(profiles.router, prefix="/api")
    application.include_router(sessions.router, prefix="/api")
    return application


app = create_app()
