"""Members Service schemas package."""

from services.members_service.schemas.member import (
    CoachSummary,
    ProfileUpdate,
    UserBase,
    UserCreate,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "CoachSummary",
    "ProfileUpdate",
    "UserBase",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
]
