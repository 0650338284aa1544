"""Service metadata routes."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.config import Settings
from app.routes.dependencies import get_app_settings

router = APIRouter(tags=["System"])


@router.get("/health")
async def health(settings: Annotated[Settings, Depends(get_app_settings)]) -> dict:
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "env": {
            "environment": settings.environment,
            "authProvider": settings.auth_provider,
            "backend": settings.backend,
        },
    }
