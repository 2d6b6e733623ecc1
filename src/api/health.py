"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from src.config import Settings, get_settings

router = APIRouter()


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)) -> dict:
    """Report liveness and which external credentials are configured."""
    return {
        "status": "running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "gemini_configured": settings.gemini_configured,
        "facebook_configured": settings.facebook_configured,
        "environment": settings.environment,
    }
