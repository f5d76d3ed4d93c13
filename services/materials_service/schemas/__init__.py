"""Materials Service schemas package."""

from services.materials_service.schemas.main import (
    CourseCreate,
    CourseMaterialSummary,
    CourseResponse,
    MaterialCreate,
    MaterialPurchaseResponse,
    MaterialResponse,
    PurchaseResponse,
)

__all__ = [
    "CourseCreate",
    "CourseMaterialSummary",
    "CourseResponse",
    "MaterialCreate",
    "MaterialPurchaseResponse",
    "MaterialResponse",
    "PurchaseResponse",
]
