"""Transactional email API integration."""

from src.email_client.client import EmailClient, EmailClientError, get_email_client
from src.email_client.config import EmailClientConfig, get_email_settings
from src.email_client.models import EmailContact, SendEmailRequest

__all__ = [
    "EmailClient",
    "EmailClientConfig",
    "EmailClientError",
    "EmailContact",
    "SendEmailRequest",
    "get_email_client",
    "get_email_settings",
]
