"""API endpoints for listing subscribers."""

import logging

from fastapi import APIRouter

from src.api.admin.subscribers.models import SubscriberListResponse, SubscriberResponse
from src.database.connection import get_session
from src.database.subscriptions import SubscriptionStatus, list_subscriptions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscribers", tags=["Subscribers"])


@router.get(
    "",
    response_model=SubscriberListResponse,
    summary="List subscribers",
)
def list_subscribers() -> SubscriberListResponse:
    """List every subscriber, newest first."""
    with get_session() as session:
        subscribers = [
            SubscriberResponse(
                id=subscription.id,
                email=subscription.email,
                name=subscription.name,
                status=SubscriptionStatus(subscription.status),
                subscribed_at=subscription.subscribed_at,
            )
            for subscription in list_subscriptions(session)
        ]

    confirmed = sum(1 for s in subscribers if s.status == SubscriptionStatus.CONFIRMED)
    return SubscriberListResponse(
        subscribers=subscribers,
        total=len(subscribers),
        confirmed=confirmed,
    )
