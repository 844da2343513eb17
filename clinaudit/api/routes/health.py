"""Health check endpoints."""

from typing import Any

from fastapi import APIRouter

from clinaudit.__version__ import __version__
from clinaudit.config import get_settings

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Check service health status."""
    return {
        "status": "healthy",
        "version": __version__,
        "environment": get_settings().environment,
    }
