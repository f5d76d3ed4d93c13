import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from services.materials_service.models import MaterialContentType


class MaterialCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    content_type: MaterialContentType = MaterialContentType.TEXT
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    # Asset URLs come from POST /assets/{category}
    video_url: Optional[str] = Field(None, max_length=500)
    thumbnail_url: Optional[str] = Field(None, max_length=500)
    external_link: Optional[str] = Field(None, max_length=500)


class MaterialResponse(BaseModel):
    id: int
    coach_id: int
    coach_name: str
    title: str
    description: Optional[str] = None
    content_type: MaterialContentType
    price: Decimal
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    external_link: Optional[str] = None
    is_published: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    thumbnail_url: Optional[str] = Field(None, max_length=500)
    material_ids: List[int] = Field(default_factory=list)


class CourseMaterialSummary(BaseModel):
    material_id: int
    title: str
    content_type: MaterialContentType
    sort_order: int


class CourseResponse(BaseModel):
    id: int
    coach_id: int
    coach_name: str
    title: str
    description: Optional[str] = None
    price: Decimal
    thumbnail_url: Optional[str] = None
    is_published: bool
    materials: List[CourseMaterialSummary] = Field(default_factory=list)
    created_at: datetime


class PurchaseResponse(BaseModel):
    purchase_id: uuid.UUID
    client_secret: str
    payment_ref: str
    amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class MaterialPurchaseResponse(BaseModel):
    id: uuid.UUID
    material_id: int
    material_title: str
    purchase_price: Decimal
    platform_fee: Decimal
    coach_earnings: Decimal
    external_payment_ref: str
    purchased_at: datetime
