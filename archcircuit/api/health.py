"""
Health check endpoint.
"""
from datetime import datetime, timezone
from fastapi import APIRouter

from archcircuit import __version__


router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check")
async def health_check():
    """Report service liveness."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }
