"""Pydantic models for newsletter publishing endpoints."""

from pydantic import BaseModel, Field


class PublishNewsletterRequest(BaseModel):
    """Request model for publishing a newsletter issue."""

    title: str = Field(..., min_length=1, max_length=500, description="Issue title")
    content: str = Field(..., min_length=1, description="Issue HTML content")
    idempotency_key: str = Field(
        ...,
        description="Caller-chosen key identifying this publish attempt across retries",
    )


class PublishFormResponse(BaseModel):
    """Response model for the publishing form."""

    idempotency_key: str = Field(..., description="Fresh idempotency key for the next publish")
