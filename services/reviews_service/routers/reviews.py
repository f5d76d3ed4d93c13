"""Video review request endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from libs.auth.dependencies import get_current_user, require_coach, require_student
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.reviews_service import projections
from services.reviews_service.lifecycle import may_view
from services.reviews_service.schemas import (
    VideoReviewComplete,
    VideoReviewRequestCreate,
    VideoReviewRequestResponse,
)
from services.reviews_service.services import review_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/reviews", tags=["video-reviews"])


@router.post(
    "",
    response_model=VideoReviewRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_request(
    payload: VideoReviewRequestCreate,
    current_user: AuthUser = Depends(require_student),
    db: AsyncSession = Depends(get_async_db),
):
    """Open a video review request, optionally for one specific coach."""
    request = await review_ops.create_request(
        db,
        student_id=current_user.user_id,
        coach_id=payload.coach_id,
        title=payload.title,
        description=payload.description,
        video_url=payload.video_url,
        offered_price=payload.offered_price,
    )
    return await projections.build_response(db, request)


@router.get("/my-requests", response_model=List[VideoReviewRequestResponse])
async def list_my_requests(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    requests = await review_ops.list_for_student(db, current_user.user_id)
    return await projections.build_responses(db, requests)


@router.get("/open", response_model=List[VideoReviewRequestResponse])
async def list_open_requests(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Open requests, best offers first.

    Coaches also see requests targeted at them; everyone else only sees
    requests open to all coaches.
    """
    coach_id = current_user.user_id if current_user.is_coach else None
    requests = await review_ops.list_open_for_coach(db, coach_id)
    return await projections.build_responses(db, requests)


@router.get("/coach", response_model=List[VideoReviewRequestResponse])
async def list_coach_requests(
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    requests = await review_ops.list_for_coach(db, current_user.user_id)
    return await projections.build_responses(db, requests)


@router.post("/{request_id}/accept", response_model=VideoReviewRequestResponse)
async def accept_request(
    request_id: int,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    request = await review_ops.accept_request(
        db, coach_id=current_user.user_id, request_id=request_id
    )
    return await projections.build_response(db, request)


@router.post("/{request_id}/complete", response_model=VideoReviewRequestResponse)
async def complete_review(
    request_id: int,
    payload: VideoReviewComplete,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    request = await review_ops.complete_review(
        db,
        coach_id=current_user.user_id,
        request_id=request_id,
        review_video_url=payload.review_video_url,
        review_notes=payload.review_notes,
    )
    return await projections.build_response(db, request)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_request(
    request_id: int,
    current_user: AuthUser = Depends(require_student),
    db: AsyncSession = Depends(get_async_db),
):
    await review_ops.cancel_request(
        db, student_id=current_user.user_id, request_id=request_id
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{request_id}", response_model=VideoReviewRequestResponse)
async def get_request(
    request_id: int,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Visible to the student, the targeted coach and the accepting coach."""
    request = await review_ops.get_request(db, request_id)
    if request is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Request not found"
        )
    if not may_view(request, current_user.user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this request",
        )
    return await projections.build_response(db, request)
