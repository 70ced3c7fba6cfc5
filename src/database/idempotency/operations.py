"""Database operations for idempotency records."""

from __future__ import annotations

import logging
import uuid as uuid_module

from sqlalchemy import func, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from src.database.idempotency.models import IdempotencyRecord

logger = logging.getLogger(__name__)


class IdempotencyRecordNotFoundError(Exception):
    """Raised when a response is saved against a key with no record."""

    pass


def insert_pending_record(
    session: Session,
    user_id: uuid_module.UUID,
    idempotency_key: str,
) -> bool:
    """Try to claim an idempotency key by inserting a pending record.

    Uses INSERT ... ON CONFLICT DO NOTHING against the primary key. If another
    transaction holds an uncommitted row for the same key, PostgreSQL blocks
    this statement until that transaction ends.

    :param session: Database session. The claim lasts as long as its transaction.
    :param user_id: The caller identity.
    :param idempotency_key: The validated idempotency key.
    :returns: True if this session now owns the key, False if a row already exists.
    """
    statement = (
        insert(IdempotencyRecord.__table__)
        .values(user_id=user_id, idempotency_key=idempotency_key, created_at=func.now())
        .on_conflict_do_nothing(index_elements=["user_id", "idempotency_key"])
    )
    inserted = session.execute(statement).rowcount > 0
    logger.debug(f"Idempotency key claim: user_id={user_id}, inserted={inserted}")
    return inserted


def get_idempotency_record(
    session: Session,
    user_id: uuid_module.UUID,
    idempotency_key: str,
) -> IdempotencyRecord | None:
    """Get the idempotency record for a caller and key.

    :param session: Database session.
    :param user_id: The caller identity.
    :param idempotency_key: The validated idempotency key.
    :returns: The record, or None if the key was never claimed.
    """
    return (
        session.query(IdempotencyRecord)
        .filter(
            IdempotencyRecord.user_id == user_id,
            IdempotencyRecord.idempotency_key == idempotency_key,
        )
        .first()
    )


def save_response_fields(
    session: Session,
    user_id: uuid_module.UUID,
    idempotency_key: str,
    status_code: int,
    headers: list[list[str]],
    body: bytes,
) -> None:
    """Write a response into a pending idempotency record.

    Does not commit; the caller commits together with the request's side effects.

    :param session: Database session that claimed the key.
    :param user_id: The caller identity.
    :param idempotency_key: The validated idempotency key.
    :param status_code: HTTP status code.
    :param headers: Ordered ``[name, value]`` header pairs.
    :param body: Raw response body.
    :raises IdempotencyRecordNotFoundError: If no record exists for the key.
    """
    statement = (
        update(IdempotencyRecord.__table__)
        .where(
            IdempotencyRecord.user_id == user_id,
            IdempotencyRecord.idempotency_key == idempotency_key,
        )
        .values(
            response_status_code=status_code,
            response_headers=headers,
            response_body=body,
        )
    )
    if session.execute(statement).rowcount == 0:
        raise IdempotencyRecordNotFoundError(
            f"No idempotency record for user_id={user_id}, key={idempotency_key!r}"
        )
    logger.debug(f"Saved response against idempotency key: user_id={user_id}")
