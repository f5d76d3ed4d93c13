"""Assemble caller-facing review views from domain entities.

Names of the student and both coaches are resolved in a single lookup per
batch rather than per row.
"""

from typing import Sequence

from libs.common.datetime_utils import as_utc
from services.members_service.services.directory import UNKNOWN_NAME, display_names
from services.reviews_service.models import VideoReviewRequest
from services.reviews_service.schemas import VideoReviewRequestResponse
from sqlalchemy.ext.asyncio import AsyncSession


def to_response(
    request: VideoReviewRequest, names: dict[int, str]
) -> VideoReviewRequestResponse:
    return VideoReviewRequestResponse(
        id=request.id,
        student_id=request.student_id,
        student_name=names.get(request.student_id, UNKNOWN_NAME),
        coach_id=request.coach_id,
        coach_name=names.get(request.coach_id) if request.coach_id else None,
        title=request.title,
        description=request.description,
        video_url=request.video_url,
        offered_price=request.offered_price,
        status=request.status,
        accepted_by_coach_id=request.accepted_by_coach_id,
        accepted_by_coach_name=(
            names.get(request.accepted_by_coach_id)
            if request.accepted_by_coach_id
            else None
        ),
        review_video_url=request.review_video_url,
        review_notes=request.review_notes,
        accepted_at=as_utc(request.accepted_at),
        completed_at=as_utc(request.completed_at),
        created_at=as_utc(request.created_at),
        updated_at=as_utc(request.updated_at),
    )


async def build_responses(
    db: AsyncSession, requests: Sequence[VideoReviewRequest]
) -> list[VideoReviewRequestResponse]:
    user_ids = set()
    for request in requests:
        user_ids.update((request.student_id, request.coach_id, request.accepted_by_coach_id))
    names = await display_names(db, user_ids)
    return [to_response(request, names) for request in requests]


async def build_response(
    db: AsyncSession, request: VideoReviewRequest
) -> VideoReviewRequestResponse:
    return (await build_responses(db, [request]))[0]
