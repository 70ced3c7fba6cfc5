"""Central enum definitions for the project."""

from enum import StrEnum


class ExecutionOutcome(StrEnum):
    """Result of one delivery worker polling cycle."""

    TASK_COMPLETED = "task_completed"
    EMPTY_QUEUE = "empty_queue"


class IssueStatus(StrEnum):
    """Delivery status of a newsletter issue as shown to operators."""

    PUBLISHED = "PUBLISHED"  # Every queued delivery has been processed
    IN_PROGRESS = "IN PROGRESS"  # Deliveries still queued
