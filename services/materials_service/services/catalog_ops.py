"""Material and course catalog operations."""

from decimal import Decimal
from typing import Optional, Sequence

from libs.common.errors import NotFoundError, ValidationError
from libs.common.logging import get_logger
from services.materials_service.models import (
    Course,
    CourseMaterial,
    MaterialContentType,
    TrainingMaterial,
)
from services.members_service.services.directory import require_coach_account
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def _check_price(price: Decimal) -> None:
    if price < 0:
        raise ValidationError("Price cannot be negative")


# ---------------------------------------------------------------------------
# Materials
# ---------------------------------------------------------------------------


async def create_material(
    db: AsyncSession,
    *,
    coach_id: int,
    title: str,
    price: Decimal,
    content_type: MaterialContentType = MaterialContentType.TEXT,
    description: Optional[str] = None,
    video_url: Optional[str] = None,
    thumbnail_url: Optional[str] = None,
    external_link: Optional[str] = None,
) -> TrainingMaterial:
    """Publish a new material for ``coach_id``."""
    if not title or not title.strip():
        raise ValidationError("Title is required")
    _check_price(price)
    await require_coach_account(db, coach_id)

    material = TrainingMaterial(
        coach_id=coach_id,
        title=title,
        description=description,
        content_type=content_type,
        price=price,
        video_url=video_url,
        thumbnail_url=thumbnail_url,
        external_link=external_link,
        is_published=True,
    )
    db.add(material)
    await db.commit()
    await db.refresh(material)
    logger.info("Material %s created by coach %s", material.id, coach_id)
    return material


async def list_published_materials(db: AsyncSession) -> list[TrainingMaterial]:
    result = await db.execute(
        select(TrainingMaterial)
        .where(TrainingMaterial.is_published.is_(True))
        .order_by(TrainingMaterial.created_at.desc(), TrainingMaterial.id.desc())
    )
    return list(result.scalars().all())


async def list_coach_materials(db: AsyncSession, coach_id: int) -> list[TrainingMaterial]:
    result = await db.execute(
        select(TrainingMaterial)
        .where(TrainingMaterial.coach_id == coach_id)
        .order_by(TrainingMaterial.created_at.desc(), TrainingMaterial.id.desc())
    )
    return list(result.scalars().all())


async def get_material(db: AsyncSession, material_id: int) -> TrainingMaterial:
    material = await db.get(TrainingMaterial, material_id)
    if material is None:
        raise NotFoundError("Material not found")
    return material


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


async def create_course(
    db: AsyncSession,
    *,
    coach_id: int,
    title: str,
    price: Decimal,
    material_ids: Sequence[int],
    description: Optional[str] = None,
    thumbnail_url: Optional[str] = None,
) -> Course:
    """Bundle the coach's own materials, keeping the given order."""
    if not title or not title.strip():
        raise ValidationError("Title is required")
    _check_price(price)
    if len(set(material_ids)) != len(material_ids):
        raise ValidationError("A material can only appear once in a course")
    await require_coach_account(db, coach_id)

    if material_ids:
        result = await db.execute(
            select(TrainingMaterial.id).where(
                TrainingMaterial.id.in_(material_ids),
                TrainingMaterial.coach_id == coach_id,
            )
        )
        owned = set(result.scalars().all())
        missing = [material_id for material_id in material_ids if material_id not in owned]
        if missing:
            raise ValidationError(f"Materials not found for this coach: {missing}")

    course = Course(
        coach_id=coach_id,
        title=title,
        description=description,
        price=price,
        thumbnail_url=thumbnail_url,
        is_published=True,
        course_materials=[
            CourseMaterial(material_id=material_id, sort_order=position)
            for position, material_id in enumerate(material_ids)
        ],
    )
    db.add(course)
    await db.commit()
    logger.info(
        "Course %s created by coach %s with %d materials",
        course.id,
        coach_id,
        len(material_ids),
    )
    return await get_course(db, course.id)


async def list_published_courses(db: AsyncSession) -> list[Course]:
    result = await db.execute(
        select(Course)
        .where(Course.is_published.is_(True))
        .order_by(Course.created_at.desc(), Course.id.desc())
    )
    return list(result.scalars().all())


async def get_course(db: AsyncSession, course_id: int) -> Course:
    result = await db.execute(
        select(Course)
        .where(Course.id == course_id)
        .execution_options(populate_existing=True)
    )
    course = result.scalar_one_or_none()
    if course is None:
        raise NotFoundError("Course not found")
    return course
