from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.auth.models import UserRole
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserBase(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = UserRole.STUDENT
    bio: Optional[str] = None


class UserCreate(UserBase):
    hourly_rate: Optional[Decimal] = Field(None, ge=0)


class UserUpdate(BaseModel):
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    hourly_rate: Optional[Decimal] = Field(None, ge=0)


class UserResponse(UserBase):
    id: int
    profile_image_url: Optional[str] = None
    hourly_rate: Optional[Decimal] = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CoachSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    hourly_rate: Optional[Decimal] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=2000)
