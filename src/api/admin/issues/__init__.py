"""Newsletter issue endpoints."""

from src.api.admin.issues.endpoints import router

__all__ = ["router"]
