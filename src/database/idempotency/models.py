"""SQLAlchemy ORM models for idempotency records."""

import uuid as uuid_module
from datetime import datetime

from sqlalchemy import DateTime, LargeBinary, SmallInteger, String, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.database.core import Base

# Maximum length of a caller-supplied idempotency key
IDEMPOTENCY_KEY_MAX_LENGTH = 50


class IdempotencyRecord(Base):
    """ORM model for idempotency table.

    The composite primary key (user_id, idempotency_key) is the lock: the
    first request to insert a row owns the key. The response columns are NULL
    while that request is in flight and are filled in by the same transaction
    that commits its side effects, so a committed row is always complete.

    Headers are stored as an ordered JSON list of ``[name, value]`` pairs whose
    strings are the latin-1 decoding of the raw header bytes.
    """

    __tablename__ = "idempotency"

    user_id: Mapped[uuid_module.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)
    idempotency_key: Mapped[str] = mapped_column(
        String(IDEMPOTENCY_KEY_MAX_LENGTH),
        primary_key=True,
    )
    response_status_code: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    response_headers: Mapped[list[list[str]] | None] = mapped_column(JSONB, nullable=True)
    response_body: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    @property
    def is_completed(self) -> bool:
        """Check if a response has been saved against this key."""
        return (
            self.response_status_code is not None
            and self.response_headers is not None
            and self.response_body is not None
        )

    def __repr__(self) -> str:
        """Return string representation of the record."""
        return (
            f"<IdempotencyRecord(user_id={self.user_id}, key={self.idempotency_key!r}, "
            f"completed={self.is_completed})>"
        )
