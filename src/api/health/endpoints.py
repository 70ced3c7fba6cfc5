"""Health check endpoints."""

import logging

from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.api.health.models import HealthResponse
from src.database.connection import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


def _check_database() -> str:
    """Run a trivial query against the database.

    :returns: "ok" if the query succeeded, otherwise "unavailable".
    """
    try:
        with get_session() as session:
            session.execute(text("SELECT 1"))
    except (SQLAlchemyError, KeyError) as e:
        logger.warning(f"Database health check failed: {e!r}")
        return "unavailable"
    return "ok"


@router.get(
    "",
    response_model=HealthResponse,
    summary="Check service health",
    description="Returns the health status of the API service and its database.",
)
def health_check(request: Request) -> HealthResponse:
    """Check if the API service is healthy.

    The service reports itself healthy while the database is unreachable so
    that orchestrators do not restart it for an outage it cannot fix.

    :returns: Health status response.
    """
    logger.debug("Health check requested")
    return HealthResponse(
        status="healthy",
        version=request.app.version,
        database=_check_database(),
    )
