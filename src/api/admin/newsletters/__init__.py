"""Newsletter publishing endpoints."""

from src.api.admin.newsletters.endpoints import router

__all__ = ["router"]
