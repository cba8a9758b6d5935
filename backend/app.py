"""FastAPI application entry point for the Prophetic API."""

import logging
import sys

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings as default_settings
from errors import register_error_handlers
from services.cache import TTLCache
from services.geolocation import GeolocationService
from services.markdown import MarkdownService
from services.vignettes import VignetteService

# Structured logging: JSON for production, human-readable for local
if default_settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    vignette_cache: TTLCache | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the app. The vignette cache lives as long as the returned app.

    *transport* replaces the network for every outbound httpx call (tests).
    """
    settings = settings or default_settings
    app = FastAPI(title="Prophetic API", version="1.0.0")

    app.state.settings = settings
    app.state.vignette_service = VignetteService(
        settings,
        vignette_cache if vignette_cache is not None else TTLCache(),
        transport=transport,
    )
    app.state.markdown_service = MarkdownService(settings, transport=transport)
    app.state.geolocation_service = GeolocationService(transport=transport)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.vignettes import router as vignettes_router
    from routes.markdown import router as markdown_router
    from routes.geolocation import router as geolocation_router

    app.include_router(health_router)
    app.include_router(vignettes_router)
    app.include_router(markdown_router)
    app.include_router(geolocation_router)

    @app.on_event("startup")
    async def _validate_config() -> None:
        missing = settings.validate()
        if missing:
            logger.warning("Missing env vars (vignette routes will fail): %s", ", ".join(missing))

    return app


app = create_app()
