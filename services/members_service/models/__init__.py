"""Members Service models package."""

from libs.auth.models import UserRole
from services.members_service.models.core import User

__all__ = [
    "User",
    "UserRole",
]
