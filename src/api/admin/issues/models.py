"""Pydantic models for newsletter issue endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.enums import IssueStatus


class IssueResponse(BaseModel):
    """Response model for a newsletter issue."""

    newsletter_issue_id: UUID = Field(..., description="Issue ID")
    title: str = Field(..., description="Issue title")
    content: str = Field(..., description="Issue HTML content")
    published_at: datetime = Field(..., description="When the issue was published")
    status: IssueStatus = Field(..., description="Delivery status")


class IssueListResponse(BaseModel):
    """Response model for the list of newsletter issues."""

    issues: list[IssueResponse] = Field(default_factory=list, description="Issues")
    total: int = Field(..., description="Number of issues")
