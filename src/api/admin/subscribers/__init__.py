"""Subscriber endpoints."""

from src.api.admin.subscribers.endpoints import router

__all__ = ["router"]
