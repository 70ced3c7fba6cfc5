"""Validation of caller-supplied idempotency keys."""

import re
from dataclasses import dataclass

from src.database.idempotency import IDEMPOTENCY_KEY_MAX_LENGTH

_ALLOWED_KEY_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


class InvalidIdempotencyKeyError(ValueError):
    """Raised when an idempotency key fails syntactic validation."""

    pass


@dataclass(frozen=True)
class IdempotencyKey:
    """A validated idempotency key.

    Non-empty, at most ``IDEMPOTENCY_KEY_MAX_LENGTH`` characters, and made of
    ASCII letters, digits, hyphens and underscores. UUIDs qualify.
    """

    value: str

    @classmethod
    def parse(cls, raw: str) -> "IdempotencyKey":
        """Validate a raw idempotency key.

        :param raw: The key as supplied by the caller.
        :returns: The validated key.
        :raises InvalidIdempotencyKeyError: If the key is empty, too long or
            contains characters outside the allowed set.
        """
        if not raw:
            raise InvalidIdempotencyKeyError("The idempotency key cannot be empty")
        if len(raw) > IDEMPOTENCY_KEY_MAX_LENGTH:
            raise InvalidIdempotencyKeyError(
                f"The idempotency key must be at most {IDEMPOTENCY_KEY_MAX_LENGTH} characters long"
            )
        if not _ALLOWED_KEY_PATTERN.fullmatch(raw):
            raise InvalidIdempotencyKeyError(
                "The idempotency key may only contain letters, digits, '-' and '_'"
            )
        return cls(value=raw)

    def __str__(self) -> str:
        """Return the raw key."""
        return self.value
