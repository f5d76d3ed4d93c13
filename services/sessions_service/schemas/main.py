from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from services.sessions_service.models import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_SESSION_TYPE,
    SessionStatus,
)


class SessionRequestCreate(BaseModel):
    coach_id: int
    session_type: str = Field(DEFAULT_SESSION_TYPE, max_length=50)
    requested_at: datetime
    duration_minutes: int = Field(DEFAULT_DURATION_MINUTES, gt=0)
    notes: Optional[str] = Field(None, max_length=2000)


class SessionConfirm(BaseModel):
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    meeting_link: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=255)


class SessionScheduleCreate(BaseModel):
    coach_id: int
    material_id: Optional[int] = None
    session_type: str = Field(DEFAULT_SESSION_TYPE, max_length=50)
    scheduled_at: datetime
    duration_minutes: int = Field(DEFAULT_DURATION_MINUTES, gt=0)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    meeting_link: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=2000)


class TrainingSessionResponse(BaseModel):
    id: int
    coach_id: int
    coach_name: str
    student_id: int
    student_name: str
    material_id: Optional[int] = None
    session_type: str
    requested_at: datetime
    scheduled_at: datetime
    duration_minutes: int
    price: Decimal
    status: SessionStatus
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
