"""Tests for newsletter issue and delivery queue database operations."""

import unittest
import uuid
from types import SimpleNamespace
from unittest.mock import MagicMock

from sqlalchemy.dialects import postgresql

from src.database.newsletters import (
    DeliveryTask,
    IssueDeliveryQueue,
    NewsletterIssue,
    count_queued_deliveries,
    create_newsletter_issue,
    delete_delivery_task,
    dequeue_delivery_task,
    enqueue_delivery_tasks,
    get_in_progress_issue_ids,
    get_newsletter_issue,
    list_newsletter_issues,
)


def _compiled_sql(mock_session: MagicMock) -> str:
    statement = mock_session.execute.call_args.args[0]
    return str(statement.compile(dialect=postgresql.dialect()))


class TestCreateNewsletterIssue(unittest.TestCase):
    """Tests for create_newsletter_issue operation."""

    def test_creates_issue(self) -> None:
        """Test that the issue is added and flushed."""
        mock_session = MagicMock()

        issue = create_newsletter_issue(mock_session, title="Weekly", content="<p>Hi</p>")

        self.assertEqual(issue.title, "Weekly")
        self.assertEqual(issue.content, "<p>Hi</p>")
        mock_session.add.assert_called_once_with(issue)
        mock_session.flush.assert_called_once()
        mock_session.commit.assert_not_called()


class TestEnqueueDeliveryTasks(unittest.TestCase):
    """Tests for enqueue_delivery_tasks operation."""

    def test_returns_number_of_queued_rows(self) -> None:
        """Test that the inserted row count is returned."""
        mock_session = MagicMock()
        mock_session.execute.return_value.rowcount = 3

        result = enqueue_delivery_tasks(mock_session, uuid.uuid4())

        self.assertEqual(result, 3)
        mock_session.execute.assert_called_once()

    def test_is_single_insert_select_over_confirmed_subscribers(self) -> None:
        """Test that the queue is filled by one set-based statement."""
        mock_session = MagicMock()
        mock_session.execute.return_value.rowcount = 0

        enqueue_delivery_tasks(mock_session, uuid.uuid4())

        sql = _compiled_sql(mock_session)
        self.assertIn("INSERT INTO issue_delivery_queue (newsletter_issue_id, subscriber_email)", sql)
        self.assertIn("SELECT", sql)
        self.assertNotIn("VALUES", sql)
        self.assertIn("FROM subscriptions", sql)
        self.assertIn("WHERE subscriptions.status =", sql)


class TestDequeueDeliveryTask(unittest.TestCase):
    """Tests for dequeue_delivery_task operation."""

    def test_returns_none_when_queue_empty(self) -> None:
        """Test that an empty queue yields no task."""
        mock_session = MagicMock()
        mock_session.execute.return_value.first.return_value = None

        result = dequeue_delivery_task(mock_session)

        self.assertIsNone(result)

    def test_returns_task_with_subscriber_name(self) -> None:
        """Test that the claimed row is returned with the joined name."""
        mock_session = MagicMock()
        issue_id = uuid.uuid4()
        mock_session.execute.return_value.first.return_value = SimpleNamespace(
            newsletter_issue_id=issue_id,
            subscriber_email="ursula@example.com",
            name="Ursula",
        )

        result = dequeue_delivery_task(mock_session)

        self.assertEqual(
            result,
            DeliveryTask(
                newsletter_issue_id=issue_id,
                subscriber_email="ursula@example.com",
                subscriber_name="Ursula",
            ),
        )

    def test_locks_one_queue_row_skipping_locked(self) -> None:
        """Test that the claim locks only the queue row and skips locked rows."""
        mock_session = MagicMock()
        mock_session.execute.return_value.first.return_value = None

        dequeue_delivery_task(mock_session)

        sql = _compiled_sql(mock_session)
        self.assertIn("LEFT OUTER JOIN subscriptions", sql)
        self.assertIn("LIMIT", sql)
        self.assertIn("FOR UPDATE OF issue_delivery_queue SKIP LOCKED", sql)


class TestDeleteDeliveryTask(unittest.TestCase):
    """Tests for delete_delivery_task operation."""

    def test_deletes_by_primary_key(self) -> None:
        """Test that exactly the claimed row is deleted."""
        mock_session = MagicMock()

        delete_delivery_task(mock_session, uuid.uuid4(), "ursula@example.com")

        sql = _compiled_sql(mock_session)
        self.assertIn("DELETE FROM issue_delivery_queue", sql)
        self.assertIn("issue_delivery_queue.newsletter_issue_id =", sql)
        self.assertIn("issue_delivery_queue.subscriber_email =", sql)


class TestGetNewsletterIssue(unittest.TestCase):
    """Tests for get_newsletter_issue operation."""

    def test_returns_issue(self) -> None:
        """Test getting an existing issue."""
        mock_session = MagicMock()
        issue = NewsletterIssue(newsletter_issue_id=uuid.uuid4(), title="t", content="c")
        mock_session.query.return_value.filter.return_value.first.return_value = issue

        result = get_newsletter_issue(mock_session, issue.newsletter_issue_id)

        self.assertEqual(result, issue)
        mock_session.query.assert_called_once_with(NewsletterIssue)

    def test_returns_none_when_missing(self) -> None:
        """Test getting an issue that does not exist."""
        mock_session = MagicMock()
        mock_session.query.return_value.filter.return_value.first.return_value = None

        self.assertIsNone(get_newsletter_issue(mock_session, uuid.uuid4()))


class TestListNewsletterIssues(unittest.TestCase):
    """Tests for list_newsletter_issues operation."""

    def test_returns_all_issues(self) -> None:
        """Test listing issues."""
        mock_session = MagicMock()
        issues = [MagicMock(), MagicMock()]
        mock_session.query.return_value.order_by.return_value.all.return_value = issues

        result = list_newsletter_issues(mock_session)

        self.assertEqual(result, issues)


class TestQueueStatusQueries(unittest.TestCase):
    """Tests for the queue status operations."""

    def test_get_in_progress_issue_ids(self) -> None:
        """Test that distinct queued issue IDs are returned as a set."""
        mock_session = MagicMock()
        first, second = uuid.uuid4(), uuid.uuid4()
        mock_session.execute.return_value.all.return_value = [
            SimpleNamespace(newsletter_issue_id=first),
            SimpleNamespace(newsletter_issue_id=second),
        ]

        result = get_in_progress_issue_ids(mock_session)

        self.assertEqual(result, {first, second})
        self.assertIn("SELECT DISTINCT", _compiled_sql(mock_session))

    def test_count_queued_deliveries(self) -> None:
        """Test counting remaining deliveries for an issue."""
        mock_session = MagicMock()
        mock_session.query.return_value.filter.return_value.count.return_value = 2

        result = count_queued_deliveries(mock_session, uuid.uuid4())

        self.assertEqual(result, 2)
        mock_session.query.assert_called_once_with(IssueDeliveryQueue)


if __name__ == "__main__":
    unittest.main()
