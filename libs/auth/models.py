import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRole(str, enum.Enum):
    STUDENT = "student"
    COACH = "coach"
    ADMIN = "admin"


class AuthUser(BaseModel):
    """
    Caller identity decoded from the bearer token.
    """

    user_id: int = Field(..., alias="sub")
    role: UserRole = UserRole.STUDENT
    email: Optional[EmailStr] = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_coach(self) -> bool:
        return self.role == UserRole.COACH

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
