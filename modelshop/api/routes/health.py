"""
Health Check API Routes

Liveness plus database connectivity.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from modelshop import __version__
from modelshop.api.deps import SessionDep
from modelshop.core.config import settings
from modelshop.core.observability import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health", summary="Overall system health")
def get_health_status(session: SessionDep) -> JSONResponse:
    """503 when the database cannot be reached."""
    try:
        session.execute(text("SELECT 1"))
        database = "healthy"
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e), exc_info=True)
        database = "unhealthy"

    healthy = database == "healthy"
    return JSONResponse(
        content={
            "status": "healthy" if healthy else "unhealthy",
            "version": __version__,
            "environment": settings.ENVIRONMENT,
            "checks": {"database": database},
        },
        status_code=200 if healthy else 503,
    )
