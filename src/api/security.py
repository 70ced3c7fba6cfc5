"""Authentication dependencies for API endpoints."""

import logging
import secrets
import uuid

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from src.api.config import ApiConfig, get_api_settings

logger = logging.getLogger(__name__)

security = HTTPBearer()


def _load_api_settings() -> ApiConfig:
    """Load API settings, mapping configuration errors to a 500.

    :returns: The API settings.
    :raises HTTPException: If the settings are missing or invalid.
    """
    try:
        return get_api_settings()
    except ValidationError as e:
        logger.error(f"API configuration error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API authentication not configured",
        ) from e


def verify_token(
    credentials: HTTPAuthorizationCredentials = Security(security),
) -> str:
    """Verify the Bearer token from request headers.

    :param credentials: The HTTP Authorisation credentials.
    :returns: The validated token.
    :raises HTTPException: If token is invalid or missing.
    """
    settings = _load_api_settings()

    if not secrets.compare_digest(credentials.credentials, settings.auth_token):
        logger.warning("Invalid API token provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return credentials.credentials


def get_caller_id(_token: str = Depends(verify_token)) -> uuid.UUID:
    """Resolve the identity of the authenticated caller.

    :param _token: The verified token.
    :returns: The operator ID bound to the token.
    """
    return _load_api_settings().operator_id
