"""Subscription database models and operations."""

from src.database.subscriptions.models import Subscription, SubscriptionStatus
from src.database.subscriptions.operations import (
    confirm_subscription,
    create_subscription,
    list_subscriptions,
)

__all__ = [
    # Models
    "Subscription",
    "SubscriptionStatus",
    # Operations
    "confirm_subscription",
    "create_subscription",
    "list_subscriptions",
]
