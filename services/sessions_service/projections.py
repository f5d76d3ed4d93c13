"""Caller-facing training session views with participant names."""

from typing import Sequence

from libs.common.datetime_utils import as_utc
from services.members_service.services.directory import UNKNOWN_NAME, display_names
from services.sessions_service.models import TrainingSession
from services.sessions_service.schemas import TrainingSessionResponse
from sqlalchemy.ext.asyncio import AsyncSession


def to_response(session: TrainingSession, names: dict[int, str]) -> TrainingSessionResponse:
    return TrainingSessionResponse(
        id=session.id,
        coach_id=session.coach_id,
        coach_name=names.get(session.coach_id, UNKNOWN_NAME),
        student_id=session.student_id,
        student_name=names.get(session.student_id, UNKNOWN_NAME),
        material_id=session.material_id,
        session_type=session.session_type,
        requested_at=as_utc(session.requested_at),
        scheduled_at=as_utc(session.scheduled_at),
        duration_minutes=session.duration_minutes,
        price=session.price,
        status=session.status,
        meeting_link=session.meeting_link,
        location=session.location,
        notes=session.notes,
        created_at=as_utc(session.created_at),
    )


async def build_responses(
    db: AsyncSession, sessions: Sequence[TrainingSession]
) -> list[TrainingSessionResponse]:
    user_ids = set()
    for session in sessions:
        user_ids.update((session.coach_id, session.student_id))
    names = await display_names(db, user_ids)
    return [to_response(session, names) for session in sessions]


async def build_response(
    db: AsyncSession, session: TrainingSession
) -> TrainingSessionResponse:
    return (await build_responses(db, [session]))[0]
