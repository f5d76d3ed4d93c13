"""Training session endpoints for students and coaches."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from libs.auth.dependencies import get_current_user, require_coach, require_student
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.sessions_service import projections
from services.sessions_service.schemas import (
    SessionConfirm,
    SessionRequestCreate,
    SessionScheduleCreate,
    TrainingSessionResponse,
)
from services.sessions_service.services import session_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/sessions", tags=["training-sessions"])


@router.post(
    "/request",
    response_model=TrainingSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_session(
    payload: SessionRequestCreate,
    current_user: AuthUser = Depends(require_student),
    db: AsyncSession = Depends(get_async_db),
):
    session = await session_ops.request_session(
        db,
        student_id=current_user.user_id,
        coach_id=payload.coach_id,
        requested_at=payload.requested_at,
        session_type=payload.session_type,
        duration_minutes=payload.duration_minutes,
        notes=payload.notes,
    )
    return await projections.build_response(db, session)


@router.post("/{session_id}/confirm", response_model=TrainingSessionResponse)
async def confirm_session(
    session_id: int,
    payload: SessionConfirm,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    session = await session_ops.confirm_session(
        db,
        coach_id=current_user.user_id,
        session_id=session_id,
        price=payload.price,
        meeting_link=payload.meeting_link,
        location=payload.location,
    )
    return await projections.build_response(db, session)


@router.post(
    "",
    response_model=TrainingSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def schedule_session(
    payload: SessionScheduleCreate,
    current_user: AuthUser = Depends(require_student),
    db: AsyncSession = Depends(get_async_db),
):
    session = await session_ops.schedule_session(
        db,
        student_id=current_user.user_id,
        coach_id=payload.coach_id,
        material_id=payload.material_id,
        scheduled_at=payload.scheduled_at,
        price=payload.price,
        session_type=payload.session_type,
        duration_minutes=payload.duration_minutes,
        meeting_link=payload.meeting_link,
        location=payload.location,
        notes=payload.notes,
    )
    return await projections.build_response(db, session)


@router.get("/coach/me", response_model=List[TrainingSessionResponse])
async def list_coach_sessions(
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    sessions = await session_ops.list_for_coach(db, current_user.user_id)
    return await projections.build_responses(db, sessions)


@router.get("/coach/pending", response_model=List[TrainingSessionResponse])
async def list_pending_requests(
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    sessions = await session_ops.list_pending_for_coach(db, current_user.user_id)
    return await projections.build_responses(db, sessions)


@router.get("/student", response_model=List[TrainingSessionResponse])
async def list_student_sessions(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    sessions = await session_ops.list_for_student(db, current_user.user_id)
    return await projections.build_responses(db, sessions)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_session(
    session_id: int,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    cancelled = await session_ops.cancel_session(
        db, session_id=session_id, user_id=current_user.user_id
    )
    if not cancelled:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
