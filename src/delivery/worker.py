"""Polling worker that delivers queued newsletter issues."""

from __future__ import annotations

import logging
import signal
import threading
from types import FrameType

from dotenv import load_dotenv
from sqlalchemy.orm import Session

from src.database.connection import get_session
from src.database.newsletters import (
    DeliveryTask,
    delete_delivery_task,
    dequeue_delivery_task,
    get_newsletter_issue,
)
from src.delivery.config import DeliveryWorkerConfig, get_delivery_worker_settings
from src.domain import InvalidSubscriberError, Subscriber
from src.email_client import EmailClient, EmailClientError, get_email_client
from src.enums import ExecutionOutcome
from src.observability.sentry import init_sentry
from src.paths import ENV_FILE
from src.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def try_execute_task(email_client: EmailClient) -> ExecutionOutcome:
    """Claim one queued delivery, attempt it and remove it from the queue.

    The claim, the send and the delete happen inside one transaction. If
    anything here raises, the transaction rolls back and the row is unlocked
    for the next poll. A failed send is logged and the row is still deleted:
    each subscriber gets at most one attempt per issue.

    :param email_client: Client used to send the email.
    :returns: ``EMPTY_QUEUE`` if nothing was claimable, else ``TASK_COMPLETED``.
    """
    with get_session() as session:
        task = dequeue_delivery_task(session)
        if task is None:
            return ExecutionOutcome.EMPTY_QUEUE

        _deliver(session, email_client, task)
        delete_delivery_task(session, task.newsletter_issue_id, task.subscriber_email)

    return ExecutionOutcome.TASK_COMPLETED


def _deliver(session: Session, email_client: EmailClient, task: DeliveryTask) -> None:
    """Send one issue to one subscriber.

    Invalid contact details and send failures are terminal for the task and are
    logged rather than raised.

    :param session: The session holding the task's row lock.
    :param email_client: Client used to send the email.
    :param task: The claimed task.
    """
    try:
        subscriber = Subscriber.parse(
            email=task.subscriber_email,
            name=task.subscriber_name or "",
        )
    except InvalidSubscriberError as e:
        logger.error(
            f"Skipping a confirmed subscriber, stored contact details are invalid: "
            f"issue_id={task.newsletter_issue_id}, error={e}"
        )
        return

    issue = get_newsletter_issue(session, task.newsletter_issue_id)
    if issue is None:
        logger.error(f"Skipping delivery of unknown newsletter issue {task.newsletter_issue_id}")
        return

    try:
        email_client.send_email(subscriber, subject=issue.title, html_content=issue.content)
    except EmailClientError as e:
        logger.error(
            f"Failed to deliver issue {task.newsletter_issue_id} to a confirmed subscriber, "
            f"skipping: {e}"
        )
        return

    logger.info(f"Delivered newsletter issue {task.newsletter_issue_id}")


class DeliveryWorker:
    """Long-running loop that drains the issue delivery queue.

    Runs a continuous loop that:
    1. Claims and processes one queued delivery
    2. Loops immediately while work remains
    3. Sleeps when the queue is empty or after an unexpected error
    4. Handles graceful shutdown on SIGINT/SIGTERM

    Any number of workers may run at once against the same database.
    """

    def __init__(
        self,
        email_client: EmailClient | None = None,
        settings: DeliveryWorkerConfig | None = None,
    ) -> None:
        """Initialise the delivery worker.

        :param email_client: Email client. If not provided, creates one from env.
        :param settings: Worker settings. If not provided, loads from env.
        """
        self._settings = settings or get_delivery_worker_settings()
        self._email_client = email_client or get_email_client()
        self._running = False
        self._stop_event = threading.Event()

    @property
    def is_running(self) -> bool:
        """Check if the worker loop is active."""
        return self._running

    def run(self) -> None:
        """Start the worker loop.

        Blocks until shutdown signal is received.
        """
        self._running = True
        self._stop_event.clear()
        self._setup_signal_handlers()

        logger.info(
            f"Starting delivery worker: empty_queue_delay={self._settings.empty_queue_delay}s, "
            f"error_retry_delay={self._settings.error_retry_delay}s"
        )

        try:
            while self._running:
                self.run_once()
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Delivery worker stopped")

    def stop(self) -> None:
        """Signal the worker loop to stop after the current cycle.

        Cuts short any back-off wait in progress.
        """
        logger.info("Stopping delivery worker...")
        self._running = False
        self._stop_event.set()

    def run_once(self) -> ExecutionOutcome | None:
        """Execute one polling cycle, waiting where the cycle calls for it.

        Waits end early once :meth:`stop` is called.

        :returns: The cycle outcome, or None if it failed unexpectedly.
        """
        try:
            outcome = try_execute_task(self._email_client)
        except Exception:
            logger.exception("Unexpected error while executing delivery task")
            self._stop_event.wait(self._settings.error_retry_delay)
            return None

        if outcome == ExecutionOutcome.EMPTY_QUEUE:
            logger.debug(f"Delivery queue empty, waiting {self._settings.empty_queue_delay}s")
            self._stop_event.wait(self._settings.empty_queue_delay)

        return outcome

    def _setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""

        def signal_handler(signum: int, frame: FrameType | None) -> None:
            logger.info(f"Received signal {signum}, initiating shutdown")
            self.stop()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)


def main() -> None:
    """Entry point for running the delivery worker."""
    load_dotenv(ENV_FILE)
    configure_logging()
    init_sentry()
    worker = DeliveryWorker()
    worker.run()


if __name__ == "__main__":
    main()
