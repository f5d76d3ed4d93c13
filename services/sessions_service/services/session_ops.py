"""Training session operations.

Two entry points feed one state machine: a student request lands in pending
and waits for the coach, a direct booking lands in confirmed. Confirmation
and cancellation are conditional updates on status plus the actor.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from libs.common.datetime_utils import utc_now
from libs.common.errors import IllegalStateError, NotFoundError, ValidationError
from libs.common.events import DomainEvent, get_event_bus
from libs.common.logging import get_logger
from services.materials_service.models import TrainingMaterial
from services.members_service.services.directory import require_coach_account
from services.sessions_service.lifecycle import (
    SESSION_TRANSITIONS,
    may_cancel,
    may_confirm,
)
from services.sessions_service.models import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_SESSION_TYPE,
    SessionAction,
    SessionStatus,
    TrainingSession,
)
from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def _load(db: AsyncSession, session_id: int) -> Optional[TrainingSession]:
    result = await db.execute(
        select(TrainingSession)
        .where(TrainingSession.id == session_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _compare_and_set(
    db: AsyncSession,
    session_id: int,
    action: SessionAction,
    *conditions: Any,
    **values: Any,
) -> bool:
    result = await db.execute(
        update(TrainingSession)
        .where(
            TrainingSession.id == session_id,
            TrainingSession.status.in_(SESSION_TRANSITIONS.sources(action)),
            *conditions,
        )
        .values(status=SESSION_TRANSITIONS.target(action), updated_at=utc_now(), **values)
        .execution_options(synchronize_session=False)
    )
    # A miss wrote nothing, so there is nothing to roll back.
    await db.commit()
    return result.rowcount == 1


async def _publish(name: str, session: TrainingSession, actor_id: int) -> None:
    await get_event_bus().publish(
        DomainEvent(
            name=name,
            entity_type="training_session",
            entity_id=session.id,
            actor_id=actor_id,
            payload={
                "status": session.status.value,
                "coach_id": session.coach_id,
                "student_id": session.student_id,
                "price": str(session.price),
            },
        )
    )


def _check_duration(duration_minutes: int) -> None:
    if duration_minutes <= 0:
        raise ValidationError("Duration must be a positive number of minutes")


async def request_session(
    db: AsyncSession,
    *,
    student_id: int,
    coach_id: int,
    requested_at: datetime,
    session_type: str = DEFAULT_SESSION_TYPE,
    duration_minutes: int = DEFAULT_DURATION_MINUTES,
    notes: Optional[str] = None,
) -> TrainingSession:
    """Ask a coach for a session. The coach's hourly rate is the opening price."""
    _check_duration(duration_minutes)
    coach = await require_coach_account(db, coach_id)

    session = TrainingSession(
        coach_id=coach_id,
        student_id=student_id,
        session_type=session_type or DEFAULT_SESSION_TYPE,
        requested_at=requested_at,
        scheduled_at=requested_at,
        duration_minutes=duration_minutes,
        price=coach.hourly_rate or Decimal("0"),
        status=SessionStatus.PENDING,
        notes=notes,
    )
    db.add(session)
    await db.commit()
    await db.refresh(session)

    logger.info(
        "Session %s requested by student %s with coach %s",
        session.id,
        student_id,
        coach_id,
    )
    await _publish("session.requested", session, student_id)
    return session


async def confirm_session(
    db: AsyncSession,
    *,
    coach_id: int,
    session_id: int,
    price: Decimal,
    meeting_link: Optional[str] = None,
    location: Optional[str] = None,
) -> TrainingSession:
    """Accept a pending request with final price and meeting details."""
    if price < 0:
        raise ValidationError("Price cannot be negative")

    confirmed = await _compare_and_set(
        db,
        session_id,
        SessionAction.CONFIRM,
        TrainingSession.coach_id == coach_id,
        price=price,
        meeting_link=meeting_link,
        location=location,
    )
    if not confirmed:
        session = await _load(db, session_id)
        # Another coach's session looks like a missing one.
        if session is None or not may_confirm(session, coach_id):
            raise NotFoundError("Session not found")
        SESSION_TRANSITIONS.next_state(session.status, SessionAction.CONFIRM)
        raise IllegalStateError(SESSION_TRANSITIONS.reject_reason(SessionAction.CONFIRM))

    session = await _load(db, session_id)
    logger.info("Session %s confirmed by coach %s", session_id, coach_id)
    await _publish("session.confirmed", session, coach_id)
    return session


async def schedule_session(
    db: AsyncSession,
    *,
    student_id: int,
    coach_id: int,
    scheduled_at: datetime,
    price: Decimal,
    session_type: str = DEFAULT_SESSION_TYPE,
    duration_minutes: int = DEFAULT_DURATION_MINUTES,
    material_id: Optional[int] = None,
    meeting_link: Optional[str] = None,
    location: Optional[str] = None,
    notes: Optional[str] = None,
) -> TrainingSession:
    """Book a session directly; it needs no confirmation."""
    _check_duration(duration_minutes)
    if price < 0:
        raise ValidationError("Price cannot be negative")
    await require_coach_account(db, coach_id)
    if material_id is not None and await db.get(TrainingMaterial, material_id) is None:
        raise ValidationError("Material not found")

    session = TrainingSession(
        coach_id=coach_id,
        student_id=student_id,
        material_id=material_id,
        session_type=session_type or DEFAULT_SESSION_TYPE,
        requested_at=utc_now(),
        scheduled_at=scheduled_at,
        duration_minutes=duration_minutes,
        price=price,
        status=SessionStatus.CONFIRMED,
        meeting_link=meeting_link,
        location=location,
        notes=notes,
    )
    db.add(session)
    await db.commit()
    await db.refresh(session)

    logger.info(
        "Session %s scheduled by student %s with coach %s",
        session.id,
        student_id,
        coach_id,
    )
    await _publish("session.scheduled", session, student_id)
    return session


async def list_for_coach(db: AsyncSession, coach_id: int) -> list[TrainingSession]:
    result = await db.execute(
        select(TrainingSession)
        .where(TrainingSession.coach_id == coach_id)
        .order_by(TrainingSession.scheduled_at.asc(), TrainingSession.id.asc())
    )
    return list(result.scalars().all())


async def list_for_student(db: AsyncSession, student_id: int) -> list[TrainingSession]:
    result = await db.execute(
        select(TrainingSession)
        .where(TrainingSession.student_id == student_id)
        .order_by(TrainingSession.scheduled_at.asc(), TrainingSession.id.asc())
    )
    return list(result.scalars().all())


async def list_pending_for_coach(db: AsyncSession, coach_id: int) -> list[TrainingSession]:
    result = await db.execute(
        select(TrainingSession)
        .where(
            TrainingSession.coach_id == coach_id,
            TrainingSession.status == SessionStatus.PENDING,
        )
        .order_by(TrainingSession.requested_at.asc(), TrainingSession.id.asc())
    )
    return list(result.scalars().all())


async def cancel_session(db: AsyncSession, *, session_id: int, user_id: int) -> bool:
    """Cancel as either participant.

    Returns False when the session does not exist or the caller is not on it,
    so outsiders learn nothing about sessions they are not on.
    """
    cancelled = await _compare_and_set(
        db,
        session_id,
        SessionAction.CANCEL,
        or_(TrainingSession.coach_id == user_id, TrainingSession.student_id == user_id),
    )
    if not cancelled:
        session = await _load(db, session_id)
        if session is None or not may_cancel(session, user_id):
            return False
        SESSION_TRANSITIONS.next_state(session.status, SessionAction.CANCEL)
        raise IllegalStateError(SESSION_TRANSITIONS.reject_reason(SessionAction.CANCEL))

    session = await _load(db, session_id)
    logger.info("Session %s cancelled by user %s", session_id, user_id)
    await _publish("session.cancelled", session, user_id)
    return True
