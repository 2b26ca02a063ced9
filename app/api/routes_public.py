"""
Public API routes - no authentication required
"""

from fastapi import APIRouter

from app.core.config import settings
from app.utils.responses import success_response

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return success_response(
        message="Service is healthy",
        data={"status": "ok", "environment": settings.ENVIRONMENT}
    )
