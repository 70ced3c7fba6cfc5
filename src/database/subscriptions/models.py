"""SQLAlchemy ORM models for newsletter subscriptions."""

import uuid as uuid_module
from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.database.core import Base


class SubscriptionStatus(StrEnum):
    """Status of a subscription."""

    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"  # Double opt-in completed, eligible for delivery


class Subscription(Base):
    """ORM model for subscriptions table.

    Only confirmed subscriptions receive newsletter issues. Contact details are
    validated on sign-up and validated again before every delivery.
    """

    __tablename__ = "subscriptions"

    id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=SubscriptionStatus.PENDING_CONFIRMATION.value,
    )
    subscribed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    __table_args__ = (Index("idx_subscriptions_status", "status"),)

    def __repr__(self) -> str:
        """Return string representation of the subscription."""
        return f"<Subscription(id={self.id}, email={self.email!r}, status={self.status})>"
