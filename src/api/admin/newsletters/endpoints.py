"""API endpoints for publishing newsletter issues."""

import logging
import time
import uuid

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import RedirectResponse

from src.api.admin.newsletters.models import PublishFormResponse, PublishNewsletterRequest
from src.api.models import ErrorResponse
from src.api.security import get_caller_id
from src.database.connection import get_session
from src.database.newsletters import create_newsletter_issue, enqueue_delivery_tasks
from src.idempotency import (
    IdempotencyKey,
    IdempotencyKeyInFlightError,
    InvalidIdempotencyKeyError,
    Replay,
    complete,
    try_begin,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/newsletters", tags=["Newsletters"])

ISSUES_PAGE_PATH = "/admin/issues"

# Seconds a client should wait before retrying a request that is still in flight
IN_FLIGHT_RETRY_AFTER_SECONDS = 1


@router.get(
    "",
    response_model=PublishFormResponse,
    summary="Get publishing form",
)
def publish_newsletter_form() -> PublishFormResponse:
    """Return a fresh idempotency key for the next publish attempt.

    Clients reuse the key for every retry of that attempt.
    """
    return PublishFormResponse(idempotency_key=str(uuid.uuid4()))


@router.post(
    "",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Publish newsletter issue",
    responses={
        303: {"description": "Issue accepted, redirect to the issues page"},
        400: {"model": ErrorResponse, "description": "Malformed idempotency key"},
        409: {"model": ErrorResponse, "description": "Same request still in progress"},
    },
)
def publish_newsletter(
    request: PublishNewsletterRequest,
    user_id: uuid.UUID = Depends(get_caller_id),
) -> Response:
    """Publish a newsletter issue to every confirmed subscriber.

    Stores the issue, queues one delivery per confirmed subscriber and saves
    the response against the idempotency key, all in one transaction. Repeating
    the request with the same key returns the saved response without queueing
    anything again.
    """
    start = time.perf_counter()

    try:
        idempotency_key = IdempotencyKey.parse(request.idempotency_key)
    except InvalidIdempotencyKeyError as e:
        logger.warning(f"Rejected publish request: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    logger.info(f"Publish newsletter: title={request.title[:50]!r}, key={idempotency_key}")

    with get_session() as session:
        try:
            next_action = try_begin(session, user_id, idempotency_key)
        except IdempotencyKeyInFlightError as e:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=str(e),
                headers={"Retry-After": str(IN_FLIGHT_RETRY_AFTER_SECONDS)},
            ) from e

        if isinstance(next_action, Replay):
            return next_action.response

        issue = create_newsletter_issue(session, title=request.title, content=request.content)
        queued = enqueue_delivery_tasks(session, issue.newsletter_issue_id)

        response = RedirectResponse(url=ISSUES_PAGE_PATH, status_code=status.HTTP_303_SEE_OTHER)
        response = complete(session, user_id, idempotency_key, response)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Publish newsletter complete: id={issue.newsletter_issue_id}, "
        f"queued={queued}, elapsed={elapsed_ms:.0f}ms"
    )

    return response
