"""Newsletter issue and delivery queue models and operations."""

from src.database.newsletters.models import IssueDeliveryQueue, NewsletterIssue
from src.database.newsletters.operations import (
    DeliveryTask,
    count_queued_deliveries,
    create_newsletter_issue,
    delete_delivery_task,
    dequeue_delivery_task,
    enqueue_delivery_tasks,
    get_in_progress_issue_ids,
    get_newsletter_issue,
    list_newsletter_issues,
)

__all__ = [
    # Models
    "DeliveryTask",
    "IssueDeliveryQueue",
    "NewsletterIssue",
    # Operations
    "count_queued_deliveries",
    "create_newsletter_issue",
    "delete_delivery_task",
    "dequeue_delivery_task",
    "enqueue_delivery_tasks",
    "get_in_progress_issue_ids",
    "get_newsletter_issue",
    "list_newsletter_issues",
]
