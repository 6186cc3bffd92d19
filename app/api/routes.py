"""
API Routes umum: health check
"""
from fastapi import APIRouter

from app.database import test_connection

router = APIRouter(prefix="/api", tags=["API"])


@router.get("/health")
async def health_check():
    """Check service health and database connection"""
    db_status = test_connection()
    return {
        "status": "ok" if db_status["status"] == "connected" else "degraded",
        "service": "Arsip & Surat BIAK",
        "database": db_status
    }
