"""Health Check — liveness endpoint for container orchestration.

Invariants:
    - GET /api/v1/health/ always returns 200 if the process is up
    - Reports the number of in-memory sessions (no external dependencies to check)
"""

import logging
from fastapi import APIRouter, status

from bart.api.routes.game_session import session_count

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness check. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "bart-api",
        "version": "1.0.0",
        "active_sessions": session_count(),
    }
