from typing import Dict

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from src.admin_api import db

router = APIRouter(tags=["Health"])


@router.get("/", summary="Health check")
def health_check() -> Dict[str, str]:
    """Liveness probe used by the admin UI to verify backend availability."""
    return {"message": "Healthy"}


@router.get("/health/ready", summary="Readiness check")
def readiness_check():
    """Readiness probe; 503 while the database is unreachable."""
    if not db.ping():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
