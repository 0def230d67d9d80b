"""Health check router (liveness greeting)."""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from apps.api.core.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health", response_class=PlainTextResponse)
async def health(settings: Settings = Depends(get_settings)) -> str:
    """Liveness probe. Returns 200 with a greeting if the process is up."""
    return f"Hello from {settings.APP_NAME}."
