"""Health Probe — liveness endpoint.

Invariants:
    - GET /health always returns 200 if the process is up
    - timestamp is unix seconds at response time
"""

import time

from fastapi import APIRouter, status

SERVICE_NAME = "PublicMusicService"
SERVICE_VERSION = "1.0.0"

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "timestamp": int(time.time()),
    }
