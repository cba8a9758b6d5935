"""Health and readiness check routes."""

from fastapi import APIRouter, Request

router = APIRouter()

SERVICE_NAME = "prophetic-api"


@router.get("/ready")
async def ready(request: Request) -> dict:
    """Lightweight readiness check — no external calls."""
    settings = request.app.state.settings
    return {"status": "ok", "service": SERVICE_NAME, "commit": settings.git_sha}


@router.get("/health")
async def health(request: Request) -> dict:
    """Report backend configuration and cache occupancy."""
    settings = request.app.state.settings
    missing = settings.validate()
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "commit": settings.git_sha,
        "upstream": "not_configured" if missing else "configured",
        "missing_config": missing,
        "cached_categories": len(request.app.state.vignette_service.cache),
    }
