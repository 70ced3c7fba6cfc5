"""Pydantic models for subscriber endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.database.subscriptions import SubscriptionStatus


class SubscriberResponse(BaseModel):
    """Response model for a subscriber."""

    id: UUID = Field(..., description="Subscription ID")
    email: str = Field(..., description="Subscriber email")
    name: str = Field(..., description="Subscriber name")
    status: SubscriptionStatus = Field(..., description="Subscription status")
    subscribed_at: datetime = Field(..., description="When the subscription was created")


class SubscriberListResponse(BaseModel):
    """Response model for the list of subscribers."""

    subscribers: list[SubscriberResponse] = Field(default_factory=list)
    total: int = Field(..., description="Number of subscribers")
    confirmed: int = Field(..., description="Number of confirmed subscribers")
