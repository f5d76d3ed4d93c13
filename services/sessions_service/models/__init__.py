"""Sessions Service models package."""

from services.sessions_service.models.core import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_SESSION_TYPE,
    TrainingSession,
)
from services.sessions_service.models.enums import SessionAction, SessionStatus

__all__ = [
    "DEFAULT_DURATION_MINUTES",
    "DEFAULT_SESSION_TYPE",
    "SessionAction",
    "SessionStatus",
    "TrainingSession",
]
