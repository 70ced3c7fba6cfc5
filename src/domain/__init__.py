"""Domain types shared by the API and the delivery worker."""

from src.domain.subscriber import (
    InvalidSubscriberError,
    Subscriber,
    parse_subscriber_email,
    parse_subscriber_name,
)

__all__ = [
    "InvalidSubscriberError",
    "Subscriber",
    "parse_subscriber_email",
    "parse_subscriber_name",
]
