"""Idempotent request processing backed by the idempotency table.

A request first calls :func:`try_begin`. If it owns the key it performs its
side effects in the same session and hands the response to :func:`complete`,
which stores the response and commits everything at once. Duplicates of a
completed request get back the stored response byte for byte.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from fastapi import Response
from sqlalchemy.orm import Session

from src.database.idempotency import (
    IdempotencyRecord,
    get_idempotency_record,
    insert_pending_record,
    save_response_fields,
)
from src.idempotency.key import IdempotencyKey

logger = logging.getLogger(__name__)

# Header names and values are bytes on the wire; latin-1 maps every byte to one
# character, so the JSON round trip is exact.
HEADER_ENCODING = "latin-1"


class IdempotencyError(Exception):
    """Raised when the idempotency table is in an unexpected state."""

    pass


class IdempotencyKeyInFlightError(Exception):
    """Raised when another request holding the same key has not completed.

    Transient: the caller should retry after a delay.
    """

    def __init__(self, user_id: uuid.UUID, idempotency_key: IdempotencyKey) -> None:
        """Initialise the error.

        :param user_id: The caller identity.
        :param idempotency_key: The key still being processed.
        """
        self.user_id = user_id
        self.idempotency_key = idempotency_key
        super().__init__(f"A request with idempotency key {idempotency_key} is still in progress")


@dataclass(frozen=True)
class Begin:
    """The session owns the key; process the request inside it."""

    session: Session


@dataclass(frozen=True)
class Replay:
    """The request was already processed; return the saved response."""

    response: Response


NextAction = Begin | Replay


def try_begin(
    session: Session,
    user_id: uuid.UUID,
    idempotency_key: IdempotencyKey,
) -> NextAction:
    """Claim an idempotency key or fetch the response saved against it.

    :param session: A fresh session. On ``Begin`` the caller must perform its side
        effects in this session and finish with :func:`complete`.
    :param user_id: The caller identity.
    :param idempotency_key: The validated key.
    :returns: ``Begin`` if this request owns the key, ``Replay`` if a completed
        response exists.
    :raises IdempotencyKeyInFlightError: If the key is claimed but not completed.
    :raises IdempotencyError: If the key is claimed but no record can be read.
    """
    if insert_pending_record(session, user_id, str(idempotency_key)):
        logger.info(f"Processing new request: user_id={user_id}, key={idempotency_key}")
        return Begin(session=session)

    record = get_idempotency_record(session, user_id, str(idempotency_key))
    if record is None:
        raise IdempotencyError(
            f"Expected a saved response for key {idempotency_key}, found no record"
        )
    if not record.is_completed:
        logger.warning(f"Duplicate request while original in flight: key={idempotency_key}")
        raise IdempotencyKeyInFlightError(user_id, idempotency_key)

    logger.info(f"Replaying saved response: user_id={user_id}, key={idempotency_key}")
    return Replay(response=_record_to_response(record))


def get_saved_response(
    session: Session,
    user_id: uuid.UUID,
    idempotency_key: IdempotencyKey,
) -> Response | None:
    """Get the completed response saved against a key.

    :param session: Database session.
    :param user_id: The caller identity.
    :param idempotency_key: The validated key.
    :returns: The rebuilt response, or None if the key is unclaimed or pending.
    """
    record = get_idempotency_record(session, user_id, str(idempotency_key))
    if record is None or not record.is_completed:
        return None
    return _record_to_response(record)


def complete(
    session: Session,
    user_id: uuid.UUID,
    idempotency_key: IdempotencyKey,
    response: Response,
) -> Response:
    """Save a response against a claimed key and commit.

    The commit publishes the request's side effects and the saved response
    together; a failure before it leaves nothing behind.

    :param session: The session returned in ``Begin``.
    :param user_id: The caller identity.
    :param idempotency_key: The validated key.
    :param response: The response to store. Must have a fully rendered body.
    :returns: The same response.
    """
    headers = [
        [name.decode(HEADER_ENCODING), value.decode(HEADER_ENCODING)]
        for name, value in response.raw_headers
    ]
    save_response_fields(
        session,
        user_id,
        str(idempotency_key),
        status_code=response.status_code,
        headers=headers,
        body=bytes(response.body),
    )
    session.commit()
    logger.info(
        f"Saved response: user_id={user_id}, key={idempotency_key}, "
        f"status={response.status_code}"
    )
    return response


def _record_to_response(record: IdempotencyRecord) -> Response:
    """Rebuild the HTTP response stored in a completed record.

    :param record: A completed idempotency record.
    :returns: A response with the stored status, ordered headers and body.
    """
    response = Response(
        content=record.response_body,
        status_code=record.response_status_code,
    )
    response.raw_headers = [
        (name.encode(HEADER_ENCODING), value.encode(HEADER_ENCODING))
        for name, value in record.response_headers or []
    ]
    return response
