"""Video review request state machine and who may drive it.

    open --accept--> accepted --complete--> completed
    open --cancel--> cancelled

Completed and cancelled are terminal.
"""

from libs.common.state_machine import TransitionTable
from services.reviews_service.models import ReviewAction, ReviewStatus, VideoReviewRequest

REVIEW_TRANSITIONS: TransitionTable[ReviewStatus, ReviewAction] = TransitionTable(
    {
        (ReviewStatus.OPEN, ReviewAction.ACCEPT): ReviewStatus.ACCEPTED,
        (ReviewStatus.OPEN, ReviewAction.CANCEL): ReviewStatus.CANCELLED,
        (ReviewStatus.ACCEPTED, ReviewAction.COMPLETE): ReviewStatus.COMPLETED,
    },
    reject_reasons={
        ReviewAction.ACCEPT: "Request is no longer available",
        ReviewAction.CANCEL: "Can only cancel open requests",
        ReviewAction.COMPLETE: "Request must be in Accepted status to complete",
    },
)

TERMINAL_STATUSES = frozenset({ReviewStatus.COMPLETED, ReviewStatus.CANCELLED})

NOT_TARGETED_COACH = "This request is for a specific coach"
NOT_ASSIGNED_COACH = "You are not assigned to this review"


def may_accept(request: VideoReviewRequest, coach_id: int) -> bool:
    """Open requests go to any coach; targeted ones only to their coach."""
    return request.coach_id is None or request.coach_id == coach_id


def may_complete(request: VideoReviewRequest, coach_id: int) -> bool:
    return request.accepted_by_coach_id == coach_id


def may_cancel(request: VideoReviewRequest, student_id: int) -> bool:
    return request.student_id == student_id


def may_view(request: VideoReviewRequest, user_id: int) -> bool:
    return user_id in (request.student_id, request.coach_id, request.accepted_by_coach_id)
