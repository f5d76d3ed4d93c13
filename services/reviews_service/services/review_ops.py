"""Video review request operations: creation, listings and guarded transitions.

Every transition is one conditional UPDATE (compare-and-set on status plus the
actor predicate). When nothing matches, the row is reloaded and the rejection
is explained with the same transition table and predicates, so two coaches
racing to accept the same request cannot both win.
"""

from decimal import Decimal
from typing import Any, Optional

from libs.common.datetime_utils import utc_now
from libs.common.errors import IllegalStateError, NotFoundError, ValidationError
from libs.common.events import DomainEvent, get_event_bus
from libs.common.logging import get_logger
from services.members_service.services.directory import require_coach_account
from services.reviews_service.lifecycle import (
    NOT_ASSIGNED_COACH,
    NOT_TARGETED_COACH,
    REVIEW_TRANSITIONS,
    may_accept,
    may_cancel,
    may_complete,
)
from services.reviews_service.models import ReviewAction, ReviewStatus, VideoReviewRequest
from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _load(db: AsyncSession, request_id: int) -> Optional[VideoReviewRequest]:
    result = await db.execute(
        select(VideoReviewRequest)
        .where(VideoReviewRequest.id == request_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _compare_and_set(
    db: AsyncSession,
    request_id: int,
    action: ReviewAction,
    *conditions: Any,
    **values: Any,
) -> bool:
    """Apply ``action`` iff the row is still in a source state and matches ``conditions``."""
    now = utc_now()
    result = await db.execute(
        update(VideoReviewRequest)
        .where(
            VideoReviewRequest.id == request_id,
            VideoReviewRequest.status.in_(REVIEW_TRANSITIONS.sources(action)),
            *conditions,
        )
        .values(status=REVIEW_TRANSITIONS.target(action), updated_at=now, **values)
        .execution_options(synchronize_session=False)
    )
    # A miss wrote nothing, so there is nothing to roll back.
    await db.commit()
    return result.rowcount == 1


async def _publish(name: str, request: VideoReviewRequest, actor_id: int) -> None:
    await get_event_bus().publish(
        DomainEvent(
            name=name,
            entity_type="video_review_request",
            entity_id=request.id,
            actor_id=actor_id,
            payload={
                "status": request.status.value,
                "student_id": request.student_id,
                "coach_id": request.coach_id,
                "accepted_by_coach_id": request.accepted_by_coach_id,
            },
        )
    )


# ---------------------------------------------------------------------------
# Student side
# ---------------------------------------------------------------------------


async def create_request(
    db: AsyncSession,
    *,
    student_id: int,
    title: str,
    video_url: str,
    offered_price: Decimal,
    description: Optional[str] = None,
    coach_id: Optional[int] = None,
) -> VideoReviewRequest:
    """Open a new review request, optionally targeted at one coach."""
    if not title or not title.strip():
        raise ValidationError("Title is required")
    if not video_url or not video_url.strip():
        raise ValidationError("Video URL is required")
    if offered_price < 0:
        raise ValidationError("Offered price cannot be negative")
    if coach_id is not None:
        await require_coach_account(db, coach_id)

    request = VideoReviewRequest(
        student_id=student_id,
        coach_id=coach_id,
        title=title,
        description=description,
        video_url=video_url,
        offered_price=offered_price,
        status=ReviewStatus.OPEN,
    )
    db.add(request)
    await db.commit()
    await db.refresh(request)

    logger.info(
        "Video review request %s created by student %s", request.id, student_id
    )
    await _publish("review.created", request, student_id)
    return request


async def list_for_student(db: AsyncSession, student_id: int) -> list[VideoReviewRequest]:
    result = await db.execute(
        select(VideoReviewRequest)
        .where(VideoReviewRequest.student_id == student_id)
        .order_by(VideoReviewRequest.created_at.desc(), VideoReviewRequest.id.desc())
    )
    return list(result.scalars().all())


async def cancel_request(db: AsyncSession, *, student_id: int, request_id: int) -> bool:
    """Withdraw an open request. Someone else's request looks like a missing one."""
    cancelled = await _compare_and_set(
        db,
        request_id,
        ReviewAction.CANCEL,
        VideoReviewRequest.student_id == student_id,
    )
    if not cancelled:
        request = await _load(db, request_id)
        if request is None or not may_cancel(request, student_id):
            raise NotFoundError("Request not found")
        REVIEW_TRANSITIONS.next_state(request.status, ReviewAction.CANCEL)
        # Lost a race against another transition on the same row.
        raise IllegalStateError(REVIEW_TRANSITIONS.reject_reason(ReviewAction.CANCEL))

    request = await _load(db, request_id)
    logger.info("Video review request %s cancelled by student %s", request_id, student_id)
    await _publish("review.cancelled", request, student_id)
    return True


# ---------------------------------------------------------------------------
# Coach side
# ---------------------------------------------------------------------------


async def list_open_for_coach(
    db: AsyncSession, coach_id: Optional[int] = None
) -> list[VideoReviewRequest]:
    """Open requests a coach can pick up, most lucrative and most recent first.

    Without a coach only requests open to everyone are returned.
    """
    query = select(VideoReviewRequest).where(
        VideoReviewRequest.status == ReviewStatus.OPEN
    )
    if coach_id is not None:
        query = query.where(
            or_(
                VideoReviewRequest.coach_id.is_(None),
                VideoReviewRequest.coach_id == coach_id,
            )
        )
    else:
        query = query.where(VideoReviewRequest.coach_id.is_(None))

    query = query.order_by(
        VideoReviewRequest.offered_price.desc(),
        VideoReviewRequest.created_at.desc(),
        VideoReviewRequest.id.desc(),
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def list_for_coach(db: AsyncSession, coach_id: int) -> list[VideoReviewRequest]:
    """Everything the coach is involved in: targeted at them or accepted by them."""
    result = await db.execute(
        select(VideoReviewRequest)
        .where(
            or_(
                VideoReviewRequest.accepted_by_coach_id == coach_id,
                VideoReviewRequest.coach_id == coach_id,
            )
        )
        .order_by(VideoReviewRequest.created_at.desc(), VideoReviewRequest.id.desc())
    )
    return list(result.scalars().all())


async def accept_request(
    db: AsyncSession, *, coach_id: int, request_id: int
) -> VideoReviewRequest:
    accepted = await _compare_and_set(
        db,
        request_id,
        ReviewAction.ACCEPT,
        or_(
            VideoReviewRequest.coach_id.is_(None),
            VideoReviewRequest.coach_id == coach_id,
        ),
        accepted_by_coach_id=coach_id,
        accepted_at=utc_now(),
    )
    if not accepted:
        request = await _load(db, request_id)
        if request is None:
            raise NotFoundError("Request not found")
        REVIEW_TRANSITIONS.next_state(request.status, ReviewAction.ACCEPT)
        if not may_accept(request, coach_id):
            raise IllegalStateError(NOT_TARGETED_COACH)
        raise IllegalStateError(REVIEW_TRANSITIONS.reject_reason(ReviewAction.ACCEPT))

    request = await _load(db, request_id)
    logger.info("Video review request %s accepted by coach %s", request_id, coach_id)
    await _publish("review.accepted", request, coach_id)
    return request


async def complete_review(
    db: AsyncSession,
    *,
    coach_id: int,
    request_id: int,
    review_video_url: Optional[str] = None,
    review_notes: Optional[str] = None,
) -> VideoReviewRequest:
    completed = await _compare_and_set(
        db,
        request_id,
        ReviewAction.COMPLETE,
        VideoReviewRequest.accepted_by_coach_id == coach_id,
        review_video_url=review_video_url,
        review_notes=review_notes,
        completed_at=utc_now(),
    )
    if not completed:
        request = await _load(db, request_id)
        if request is None:
            raise NotFoundError("Request not found")
        if not may_complete(request, coach_id):
            raise IllegalStateError(NOT_ASSIGNED_COACH)
        REVIEW_TRANSITIONS.next_state(request.status, ReviewAction.COMPLETE)
        raise IllegalStateError(REVIEW_TRANSITIONS.reject_reason(ReviewAction.COMPLETE))

    request = await _load(db, request_id)
    logger.info("Video review request %s completed by coach %s", request_id, coach_id)
    await _publish("review.completed", request, coach_id)
    return request


async def get_request(db: AsyncSession, request_id: int) -> Optional[VideoReviewRequest]:
    """Fetch one request. Visibility is the caller's concern."""
    return await _load(db, request_id)
