"""Health check endpoint."""

from fastapi import APIRouter

from src.background import is_shutting_down, pending_task_count
from src.config import get_settings

router = APIRouter()


@router.get("/health")
def health():
    """Liveness probe; reports shutdown state and queued follow-ups."""
    settings = get_settings()
    return {
        "status": "shutting_down" if is_shutting_down() else "healthy",
        "environment": settings.env,
        "pending_follow_ups": pending_task_count(),
    }
