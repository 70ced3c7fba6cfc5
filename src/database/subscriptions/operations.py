"""Database operations for newsletter subscriptions."""

from __future__ import annotations

import logging
import uuid as uuid_module

from sqlalchemy.orm import Session

from src.database.subscriptions.models import Subscription, SubscriptionStatus

logger = logging.getLogger(__name__)


def create_subscription(session: Session, email: str, name: str) -> Subscription:
    """Create a subscription awaiting confirmation.

    :param session: Database session.
    :param email: The subscriber email address (already validated).
    :param name: The subscriber name (already validated).
    :returns: The created subscription.
    """
    subscription = Subscription(
        email=email,
        name=name,
        status=SubscriptionStatus.PENDING_CONFIRMATION.value,
    )
    session.add(subscription)
    session.flush()
    logger.info(f"Created subscription: id={subscription.id}")
    return subscription


def confirm_subscription(session: Session, subscription_id: uuid_module.UUID) -> bool:
    """Mark a subscription as confirmed.

    :param session: Database session.
    :param subscription_id: The subscription ID.
    :returns: True if the subscription exists and is now confirmed.
    """
    subscription = (
        session.query(Subscription).filter(Subscription.id == subscription_id).first()
    )
    if subscription is None:
        logger.warning(f"Cannot confirm unknown subscription: id={subscription_id}")
        return False

    subscription.status = SubscriptionStatus.CONFIRMED.value
    session.flush()
    logger.info(f"Confirmed subscription: id={subscription_id}")
    return True


def list_subscriptions(session: Session) -> list[Subscription]:
    """List all subscriptions, newest first.

    :param session: Database session.
    :returns: All subscriptions.
    """
    return session.query(Subscription).order_by(Subscription.subscribed_at.desc()).all()
