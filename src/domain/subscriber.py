"""Subscriber contact details and their validation."""

from __future__ import annotations

import regex
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict

SUBSCRIBER_NAME_MAX_LENGTH = 256
FORBIDDEN_NAME_CHARACTERS = frozenset('/()"<>\\{}')

# One match per extended grapheme cluster, the user-perceived character
_GRAPHEME_PATTERN = regex.compile(r"\X")


class InvalidSubscriberError(ValueError):
    """Raised when subscriber contact details fail validation."""

    pass


def parse_subscriber_email(email: str) -> str:
    """Validate a subscriber email address.

    The address is returned exactly as given so it still matches stored rows.
    Dotless domains such as internal mail hosts are accepted.

    :param email: The raw email address.
    :returns: The validated address.
    :raises InvalidSubscriberError: If the address is not a valid email.
    """
    try:
        validate_email(email, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError as e:
        raise InvalidSubscriberError(f"{email!r} is not a valid subscriber email: {e}") from e
    return email


def parse_subscriber_name(name: str) -> str:
    """Validate a subscriber name.

    Length is counted in grapheme clusters, so a letter written with combining
    marks counts once.

    :param name: The raw name.
    :returns: The validated name.
    :raises InvalidSubscriberError: If the name is blank, too long or contains
        a forbidden character.
    """
    if not name.strip():
        raise InvalidSubscriberError("Subscriber name cannot be empty")
    if len(_GRAPHEME_PATTERN.findall(name)) > SUBSCRIBER_NAME_MAX_LENGTH:
        raise InvalidSubscriberError(
            f"Subscriber name must be at most {SUBSCRIBER_NAME_MAX_LENGTH} characters long"
        )
    if any(character in FORBIDDEN_NAME_CHARACTERS for character in name):
        raise InvalidSubscriberError(f"{name!r} contains a forbidden character")
    return name


class Subscriber(BaseModel):
    """A subscriber whose email and name passed validation."""

    model_config = ConfigDict(frozen=True)

    email: str
    name: str

    @classmethod
    def parse(cls, email: str, name: str) -> Subscriber:
        """Build a subscriber from raw stored contact details.

        :param email: The raw email address.
        :param name: The raw name.
        :returns: The validated subscriber.
        :raises InvalidSubscriberError: If either field is invalid.
        """
        return cls(email=parse_subscriber_email(email), name=parse_subscriber_name(name))
