"""API endpoints for inspecting published newsletter issues."""

import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.api.admin.issues.models import IssueListResponse, IssueResponse
from src.api.models import ErrorResponse
from src.database.connection import get_session
from src.database.newsletters import (
    NewsletterIssue,
    count_queued_deliveries,
    get_in_progress_issue_ids,
    get_newsletter_issue,
    list_newsletter_issues,
)
from src.enums import IssueStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/issues", tags=["Issues"])


def _issue_to_response(issue: NewsletterIssue, in_progress: bool) -> IssueResponse:
    """Convert an issue model to response.

    :param issue: The database model.
    :param in_progress: Whether deliveries are still queued for the issue.
    :returns: API response model.
    """
    return IssueResponse(
        newsletter_issue_id=issue.newsletter_issue_id,
        title=issue.title,
        content=issue.content,
        published_at=issue.published_at,
        status=IssueStatus.IN_PROGRESS if in_progress else IssueStatus.PUBLISHED,
    )


@router.get(
    "",
    response_model=IssueListResponse,
    summary="List newsletter issues",
)
def list_issues() -> IssueListResponse:
    """List every published issue with its delivery status.

    An issue is in progress while any delivery for it is still queued.
    """
    with get_session() as session:
        issues = list_newsletter_issues(session)
        in_progress_ids = get_in_progress_issue_ids(session)
        responses = [
            _issue_to_response(issue, issue.newsletter_issue_id in in_progress_ids)
            for issue in issues
        ]

    logger.debug(f"Listed {len(responses)} issues, {len(in_progress_ids)} in progress")
    return IssueListResponse(issues=responses, total=len(responses))


@router.get(
    "/{issue_id}",
    response_model=IssueResponse,
    summary="Get newsletter issue",
    responses={404: {"model": ErrorResponse, "description": "Issue not found"}},
)
def get_issue(issue_id: UUID) -> IssueResponse:
    """Get a single issue with its delivery status."""
    with get_session() as session:
        issue = get_newsletter_issue(session, issue_id)
        if issue is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Newsletter issue not found: {issue_id}",
            )
        return _issue_to_response(issue, count_queued_deliveries(session, issue_id) > 0)
