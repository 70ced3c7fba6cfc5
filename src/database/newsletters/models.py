"""SQLAlchemy ORM models for newsletter issues and their delivery queue."""

import uuid as uuid_module
from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.database.core import Base


class NewsletterIssue(Base):
    """ORM model for newsletter_issues table.

    Written once when an operator publishes, never updated afterwards. The
    delivery worker reads the title and content at send time.
    """

    __tablename__ = "newsletter_issues"

    newsletter_issue_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    published_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        """Return string representation of the issue."""
        return f"<NewsletterIssue(id={self.newsletter_issue_id}, title={self.title!r})>"


class IssueDeliveryQueue(Base):
    """ORM model for issue_delivery_queue table.

    One row per (issue, subscriber) delivery still owed. Rows are created in
    bulk in the publishing transaction and deleted by whichever worker
    processes them; the row's existence is the only record of pending work.
    """

    __tablename__ = "issue_delivery_queue"

    newsletter_issue_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("newsletter_issues.newsletter_issue_id"),
        primary_key=True,
    )
    subscriber_email: Mapped[str] = mapped_column(Text, primary_key=True)

    def __repr__(self) -> str:
        """Return string representation of the queue entry."""
        return (
            f"<IssueDeliveryQueue(issue_id={self.newsletter_issue_id}, "
            f"email={self.subscriber_email!r})>"
        )
