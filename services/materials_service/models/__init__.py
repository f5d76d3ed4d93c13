"""Materials Service models package."""

from services.materials_service.models.core import (
    Course,
    CourseMaterial,
    CoursePurchase,
    MaterialPurchase,
    TrainingMaterial,
)
from services.materials_service.models.enums import MaterialContentType

__all__ = [
    "Course",
    "CourseMaterial",
    "CoursePurchase",
    "MaterialContentType",
    "MaterialPurchase",
    "TrainingMaterial",
]
