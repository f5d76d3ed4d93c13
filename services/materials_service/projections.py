"""Caller-facing catalog and purchase views."""

from typing import Sequence

from libs.common.datetime_utils import as_utc
from services.materials_service.models import (
    Course,
    MaterialPurchase,
    TrainingMaterial,
)
from services.materials_service.schemas import (
    CourseMaterialSummary,
    CourseResponse,
    MaterialPurchaseResponse,
    MaterialResponse,
)
from services.members_service.services.directory import UNKNOWN_NAME, display_names
from sqlalchemy.ext.asyncio import AsyncSession


def material_to_response(material: TrainingMaterial, names: dict[int, str]) -> MaterialResponse:
    return MaterialResponse(
        id=material.id,
        coach_id=material.coach_id,
        coach_name=names.get(material.coach_id, UNKNOWN_NAME),
        title=material.title,
        description=material.description,
        content_type=material.content_type,
        price=material.price,
        video_url=material.video_url,
        thumbnail_url=material.thumbnail_url,
        external_link=material.external_link,
        is_published=material.is_published,
        created_at=as_utc(material.created_at),
    )


async def build_material_responses(
    db: AsyncSession, materials: Sequence[TrainingMaterial]
) -> list[MaterialResponse]:
    names = await display_names(db, {material.coach_id for material in materials})
    return [material_to_response(material, names) for material in materials]


async def build_material_response(
    db: AsyncSession, material: TrainingMaterial
) -> MaterialResponse:
    return (await build_material_responses(db, [material]))[0]


def course_to_response(course: Course, names: dict[int, str]) -> CourseResponse:
    return CourseResponse(
        id=course.id,
        coach_id=course.coach_id,
        coach_name=names.get(course.coach_id, UNKNOWN_NAME),
        title=course.title,
        description=course.description,
        price=course.price,
        thumbnail_url=course.thumbnail_url,
        is_published=course.is_published,
        materials=[
            CourseMaterialSummary(
                material_id=link.material_id,
                title=link.material.title,
                content_type=link.material.content_type,
                sort_order=link.sort_order,
            )
            for link in course.course_materials
        ],
        created_at=as_utc(course.created_at),
    )


async def build_course_responses(
    db: AsyncSession, courses: Sequence[Course]
) -> list[CourseResponse]:
    names = await display_names(db, {course.coach_id for course in courses})
    return [course_to_response(course, names) for course in courses]


async def build_course_response(db: AsyncSession, course: Course) -> CourseResponse:
    return (await build_course_responses(db, [course]))[0]


def purchase_to_response(
    purchase: MaterialPurchase, material: TrainingMaterial
) -> MaterialPurchaseResponse:
    return MaterialPurchaseResponse(
        id=purchase.id,
        material_id=material.id,
        material_title=material.title,
        purchase_price=purchase.purchase_price,
        platform_fee=purchase.platform_fee,
        coach_earnings=purchase.coach_earnings,
        external_payment_ref=purchase.external_payment_ref,
        purchased_at=as_utc(purchase.purchased_at),
    )
