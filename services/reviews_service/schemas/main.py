from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from services.reviews_service.models import ReviewStatus


class VideoReviewRequestCreate(BaseModel):
    coach_id: Optional[int] = None  # None opens the request to every coach
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    video_url: str = Field(..., min_length=1, max_length=500)
    offered_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class VideoReviewComplete(BaseModel):
    review_video_url: Optional[str] = Field(None, max_length=500)
    review_notes: Optional[str] = Field(None, max_length=2000)


class VideoReviewRequestResponse(BaseModel):
    id: int
    student_id: int
    student_name: str
    coach_id: Optional[int] = None
    coach_name: Optional[str] = None
    title: str
    description: Optional[str] = None
    video_url: str
    offered_price: Decimal
    status: ReviewStatus
    accepted_by_coach_id: Optional[int] = None
    accepted_by_coach_name: Optional[str] = None
    review_video_url: Optional[str] = None
    review_notes: Optional[str] = None
    accepted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
