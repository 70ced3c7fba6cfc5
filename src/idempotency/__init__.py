"""Idempotent handling of retried HTTP requests."""

from src.idempotency.key import IdempotencyKey, InvalidIdempotencyKeyError
from src.idempotency.persistence import (
    Begin,
    IdempotencyError,
    IdempotencyKeyInFlightError,
    NextAction,
    Replay,
    complete,
    get_saved_response,
    try_begin,
)

__all__ = [
    "Begin",
    "IdempotencyError",
    "IdempotencyKey",
    "IdempotencyKeyInFlightError",
    "InvalidIdempotencyKeyError",
    "NextAction",
    "Replay",
    "complete",
    "get_saved_response",
    "try_begin",
]
