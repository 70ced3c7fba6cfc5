"""FastAPI application configuration."""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.api.admin import router as admin_router
from src.api.health import router as health_router
from src.api.models import ErrorResponse
from src.observability.sentry import init_sentry
from src.paths import ENV_FILE
from src.utils.logging import configure_logging

load_dotenv(ENV_FILE)
configure_logging()
init_sentry()

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"


def _database_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn database failures into a 500 response.

    The failing transaction has already been rolled back by the session scope.

    :param request: The request being handled.
    :param exc: The database error.
    :returns: A JSON error response.
    """
    logger.error(f"Database error handling {request.method} {request.url.path}: {exc!r}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(detail="Internal server error").model_dump(),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    :returns: Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Newsletter Delivery API",
        version=APP_VERSION,
        responses={
            401: {"model": ErrorResponse, "description": "Unauthorised"},
            500: {"model": ErrorResponse, "description": "Internal server error"},
        },
    )

    application.add_exception_handler(SQLAlchemyError, _database_error_handler)

    # Register routers
    application.include_router(health_router)
    application.include_router(admin_router)

    logger.info("FastAPI application created")

    return application


# Application instance for uvicorn
app = create_app()
