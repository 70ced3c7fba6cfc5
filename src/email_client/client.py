"""Client for the transactional email HTTP API."""

import logging

import requests

from src.domain import Subscriber
from src.email_client.config import EmailClientConfig, get_email_settings
from src.email_client.models import EmailContact, SendEmailRequest

logger = logging.getLogger(__name__)

SEND_EMAIL_PATH = "/v3/smtp/email"


class EmailClientError(Exception):
    """Raised when the email API request fails."""

    pass


class EmailClient:
    """Client for sending emails through the transactional email API.

    Each call is synchronous and either succeeds or raises; there is no
    partial success.
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        sender: Subscriber,
        timeout_ms: int = 10_000,
    ) -> None:
        """Initialise the email client.

        :param base_url: Base URL of the email API.
        :param api_key: API key for the ``api-key`` header.
        :param sender: The validated sender identity.
        :param timeout_ms: Request timeout in milliseconds.
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._sender = sender
        self._timeout = timeout_ms / 1000
        logger.debug(f"EmailClient initialised with timeout={self._timeout}s")

    @property
    def sender(self) -> Subscriber:
        """Get the configured sender."""
        return self._sender

    def send_email(self, recipient: Subscriber, subject: str, html_content: str) -> None:
        """Send an HTML email to a single recipient.

        :param recipient: The validated recipient.
        :param subject: The email subject.
        :param html_content: The HTML body.
        :raises EmailClientError: If the request fails or the API returns an error status.
        """
        url = f"{self._base_url}{SEND_EMAIL_PATH}"
        body = SendEmailRequest(
            sender=EmailContact(name=self._sender.name, email=self._sender.email),
            to=[EmailContact(name=recipient.name, email=recipient.email)],
            subject=subject,
            html_content=html_content,
        )
        headers = {"api-key": self._api_key, "accept": "application/json"}

        try:
            response = requests.post(
                url,
                json=body.model_dump(by_alias=True),
                headers=headers,
                timeout=self._timeout,
            )
            response.raise_for_status()

        except requests.exceptions.Timeout as e:
            raise EmailClientError(
                f"Email API request timed out after {self._timeout}s for {recipient.email}"
            ) from e
        except requests.exceptions.RequestException as e:
            raise EmailClientError(f"Failed to send email to {recipient.email}: {e}") from e

        logger.info(f"Email sent: subject={subject[:50]!r}")


def get_email_client(settings: EmailClientConfig | None = None) -> EmailClient:
    """Build an email client from settings.

    :param settings: Email settings. If not provided, loads from env.
    :returns: A configured EmailClient.
    :raises InvalidSubscriberError: If the configured sender is invalid.
    """
    settings = settings or get_email_settings()
    return EmailClient(
        base_url=settings.base_url,
        api_key=settings.api_key,
        sender=Subscriber.parse(email=settings.sender_email, name=settings.sender_name),
        timeout_ms=settings.timeout_ms,
    )
