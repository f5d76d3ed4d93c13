"""Training session state machine.

    pending --confirm--> confirmed
    pending --cancel--> cancelled
    confirmed --cancel--> cancelled

Direct bookings start in confirmed. Cancelled is terminal.
"""

from libs.common.state_machine import TransitionTable
from services.sessions_service.models import SessionAction, SessionStatus, TrainingSession

SESSION_TRANSITIONS: TransitionTable[SessionStatus, SessionAction] = TransitionTable(
    {
        (SessionStatus.PENDING, SessionAction.CONFIRM): SessionStatus.CONFIRMED,
        (SessionStatus.PENDING, SessionAction.CANCEL): SessionStatus.CANCELLED,
        (SessionStatus.CONFIRMED, SessionAction.CANCEL): SessionStatus.CANCELLED,
    },
    reject_reasons={
        SessionAction.CONFIRM: "Session is not pending confirmation",
        SessionAction.CANCEL: "Session is already cancelled",
    },
)


def may_confirm(session: TrainingSession, coach_id: int) -> bool:
    return session.coach_id == coach_id


def may_cancel(session: TrainingSession, user_id: int) -> bool:
    """Either participant may cancel."""
    return user_id in (session.coach_id, session.student_id)
