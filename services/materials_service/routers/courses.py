"""Course catalog and purchase endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_coach, require_student
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.materials_service import projections
from services.materials_service.schemas import (
    CourseCreate,
    CourseResponse,
    PurchaseResponse,
)
from services.materials_service.services import catalog_ops, purchase_ops
from services.payments_service.gateway import PaymentGateway, get_payment_gateway
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/courses", tags=["courses"])


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    payload: CourseCreate,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    course = await catalog_ops.create_course(
        db,
        coach_id=current_user.user_id,
        title=payload.title,
        description=payload.description,
        price=payload.price,
        thumbnail_url=payload.thumbnail_url,
        material_ids=payload.material_ids,
    )
    return await projections.build_course_response(db, course)


@router.get("", response_model=List[CourseResponse])
async def list_courses(db: AsyncSession = Depends(get_async_db)):
    courses = await catalog_ops.list_published_courses(db)
    return await projections.build_course_responses(db, courses)


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(course_id: int, db: AsyncSession = Depends(get_async_db)):
    course = await catalog_ops.get_course(db, course_id)
    return await projections.build_course_response(db, course)


@router.post("/{course_id}/purchase", response_model=PurchaseResponse)
async def purchase_course(
    course_id: int,
    current_user: AuthUser = Depends(require_student),
    db: AsyncSession = Depends(get_async_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    return await purchase_ops.purchase_course(
        db, gateway, student_id=current_user.user_id, course_id=course_id
    )
