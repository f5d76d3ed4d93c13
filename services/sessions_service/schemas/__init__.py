"""Sessions Service schemas package."""

from services.sessions_service.schemas.main import (
    SessionConfirm,
    SessionRequestCreate,
    SessionScheduleCreate,
    TrainingSessionResponse,
)

__all__ = [
    "SessionConfirm",
    "SessionRequestCreate",
    "SessionScheduleCreate",
    "TrainingSessionResponse",
]
