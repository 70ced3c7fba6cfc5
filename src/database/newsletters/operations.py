"""Database operations for newsletter issues and the delivery queue."""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import delete, insert, literal, select
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Session

from src.database.newsletters.models import IssueDeliveryQueue, NewsletterIssue
from src.database.subscriptions.models import Subscription, SubscriptionStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryTask:
    """A claimed delivery queue row and the subscriber's stored contact details.

    ``subscriber_name`` is None when the subscription row no longer exists.
    """

    newsletter_issue_id: uuid.UUID
    subscriber_email: str
    subscriber_name: str | None


def create_newsletter_issue(session: Session, title: str, content: str) -> NewsletterIssue:
    """Store a new newsletter issue.

    :param session: The database session.
    :param title: The issue title, used as the email subject.
    :param content: The issue HTML content.
    :returns: The created issue.
    """
    issue = NewsletterIssue(title=title, content=content)
    session.add(issue)
    session.flush()  # Get the issue ID
    logger.info(f"Stored newsletter issue: id={issue.newsletter_issue_id}")
    return issue


def enqueue_delivery_tasks(session: Session, newsletter_issue_id: uuid.UUID) -> int:
    """Queue one delivery per currently confirmed subscriber.

    A single set-based INSERT ... SELECT, so the subscriber list is the one
    visible at this instant. Subscribers confirmed later are not included.

    :param session: The database session.
    :param newsletter_issue_id: The issue to deliver.
    :returns: The number of queued deliveries.
    """
    confirmed_subscribers = select(
        literal(newsletter_issue_id, UUID(as_uuid=True)),
        Subscription.email,
    ).where(Subscription.status == SubscriptionStatus.CONFIRMED.value)

    statement = insert(IssueDeliveryQueue.__table__).from_select(
        ["newsletter_issue_id", "subscriber_email"],
        confirmed_subscribers,
    )
    queued = session.execute(statement).rowcount

    logger.info(f"Queued {queued} deliveries for newsletter issue {newsletter_issue_id}")
    return queued


def dequeue_delivery_task(session: Session) -> DeliveryTask | None:
    """Claim one delivery queue row for the lifetime of the session's transaction.

    The row is locked with FOR UPDATE SKIP LOCKED, so concurrent workers each
    see only rows no other open transaction holds. The lock is released when
    the transaction commits or rolls back.

    :param session: The database session. Must stay open until the task is done.
    :returns: The claimed task, or None if no unlocked row exists.
    """
    statement = (
        select(
            IssueDeliveryQueue.newsletter_issue_id,
            IssueDeliveryQueue.subscriber_email,
            Subscription.name,
        )
        .outerjoin(Subscription, Subscription.email == IssueDeliveryQueue.subscriber_email)
        .limit(1)
        .with_for_update(skip_locked=True, of=IssueDeliveryQueue)
    )
    row = session.execute(statement).first()
    if row is None:
        return None

    return DeliveryTask(
        newsletter_issue_id=row.newsletter_issue_id,
        subscriber_email=row.subscriber_email,
        subscriber_name=row.name,
    )


def delete_delivery_task(
    session: Session,
    newsletter_issue_id: uuid.UUID,
    subscriber_email: str,
) -> None:
    """Remove a processed delivery queue row.

    :param session: The database session holding the row lock.
    :param newsletter_issue_id: The issue ID.
    :param subscriber_email: The subscriber email.
    """
    session.execute(
        delete(IssueDeliveryQueue).where(
            IssueDeliveryQueue.newsletter_issue_id == newsletter_issue_id,
            IssueDeliveryQueue.subscriber_email == subscriber_email,
        )
    )
    logger.debug(f"Deleted delivery task: issue_id={newsletter_issue_id}")


def get_newsletter_issue(
    session: Session,
    newsletter_issue_id: uuid.UUID,
) -> NewsletterIssue | None:
    """Get a newsletter issue by its ID.

    :param session: The database session.
    :param newsletter_issue_id: The issue ID.
    :returns: The issue, or None if not found.
    """
    return (
        session.query(NewsletterIssue)
        .filter(NewsletterIssue.newsletter_issue_id == newsletter_issue_id)
        .first()
    )


def list_newsletter_issues(session: Session) -> list[NewsletterIssue]:
    """List all newsletter issues, most recently published first.

    :param session: The database session.
    :returns: All issues.
    """
    return session.query(NewsletterIssue).order_by(NewsletterIssue.published_at.desc()).all()


def get_in_progress_issue_ids(session: Session) -> set[uuid.UUID]:
    """Get the IDs of issues that still have deliveries queued.

    :param session: The database session.
    :returns: Issue IDs with at least one queue row.
    """
    rows = session.execute(select(IssueDeliveryQueue.newsletter_issue_id).distinct()).all()
    return {row.newsletter_issue_id for row in rows}


def count_queued_deliveries(session: Session, newsletter_issue_id: uuid.UUID) -> int:
    """Count the deliveries still queued for an issue.

    :param session: The database session.
    :param newsletter_issue_id: The issue ID.
    :returns: Number of queue rows for the issue.
    """
    return (
        session.query(IssueDeliveryQueue)
        .filter(IssueDeliveryQueue.newsletter_issue_id == newsletter_issue_id)
        .count()
    )
