"""Idempotency record models and operations."""

from src.database.idempotency.models import IDEMPOTENCY_KEY_MAX_LENGTH, IdempotencyRecord
from src.database.idempotency.operations import (
    IdempotencyRecordNotFoundError,
    get_idempotency_record,
    insert_pending_record,
    save_response_fields,
)

__all__ = [
    # Models
    "IDEMPOTENCY_KEY_MAX_LENGTH",
    "IdempotencyRecord",
    # Operations
    "IdempotencyRecordNotFoundError",
    "get_idempotency_record",
    "insert_pending_record",
    "save_response_fields",
]
