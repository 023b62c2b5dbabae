import logging

from fastapi import APIRouter
from sqlalchemy import text

from ledgerapi.database.session import get_db_context
from ledgerapi.schemas.health import HealthCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
def health_check() -> HealthCheckResponse:
    """Health check endpoint."""

    try:
        with get_db_context() as db:
            db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check database ping failed: {type(e).__name__}: {e}")
        return HealthCheckResponse(
            status="degraded", database_ok=False, error="database unavailable"
        )

    return HealthCheckResponse()
