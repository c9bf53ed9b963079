"""
Health check routes for monitoring.
"""
from fastapi import APIRouter
from src.core.timeutils import iso_timestamp

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "OK",
        "message": "Drug Inventory API is running",
        "timestamp": iso_timestamp()
    }
