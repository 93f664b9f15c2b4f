"""
Health API endpoints
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.config import config
from app.telemetry import get_telemetry_client

router = APIRouter()


@router.get("/health")
def health_check():
    """Basic health check endpoint, including the telemetry buffer state"""
    emitter = get_telemetry_client().emitter
    return {
        "status": "healthy",
        "service": config.service_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": config.service_version,
        "telemetry": {
            "enabled": config.telemetry_enabled,
            "pendingEvents": emitter.pending,
            "droppedEvents": emitter.dropped_count,
        },
    }
