"""Health check routes."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter

from pharmacy_assistant.core.config import get_settings
from pharmacy_assistant.core.utils import utcnow

router = APIRouter()


@router.get("/health")
def health_check() -> Dict[str, Any]:
    """Liveness check - always returns OK."""
    settings = get_settings()
    return {
        "status": "healthy",
        "timestamp": utcnow().isoformat(),
        "environment": settings.environment,
        "enabled_services": settings.get_enabled_services(),
    }
