"""Training material catalog and purchase endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import get_current_user, require_coach, require_student
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.materials_service import projections
from services.materials_service.schemas import (
    MaterialCreate,
    MaterialPurchaseResponse,
    MaterialResponse,
    PurchaseResponse,
)
from services.materials_service.services import catalog_ops, purchase_ops
from services.payments_service.gateway import PaymentGateway, get_payment_gateway
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/materials", tags=["materials"])


@router.post("", response_model=MaterialResponse, status_code=status.HTTP_201_CREATED)
async def create_material(
    payload: MaterialCreate,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    material = await catalog_ops.create_material(
        db,
        coach_id=current_user.user_id,
        title=payload.title,
        description=payload.description,
        content_type=payload.content_type,
        price=payload.price,
        video_url=payload.video_url,
        thumbnail_url=payload.thumbnail_url,
        external_link=payload.external_link,
    )
    return await projections.build_material_response(db, material)


@router.get("", response_model=List[MaterialResponse])
async def list_materials(db: AsyncSession = Depends(get_async_db)):
    """Published materials, newest first."""
    materials = await catalog_ops.list_published_materials(db)
    return await projections.build_material_responses(db, materials)


@router.get("/purchases/me", response_model=List[MaterialPurchaseResponse])
async def list_my_purchases(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    rows = await purchase_ops.list_my_purchases(db, current_user.user_id)
    return [projections.purchase_to_response(purchase, material) for purchase, material in rows]


@router.get("/coach/{coach_id}", response_model=List[MaterialResponse])
async def list_coach_materials(coach_id: int, db: AsyncSession = Depends(get_async_db)):
    materials = await catalog_ops.list_coach_materials(db, coach_id)
    return await projections.build_material_responses(db, materials)


@router.get("/{material_id}", response_model=MaterialResponse)
async def get_material(material_id: int, db: AsyncSession = Depends(get_async_db)):
    material = await catalog_ops.get_material(db, material_id)
    return await projections.build_material_response(db, material)


@router.post("/{material_id}/purchase", response_model=PurchaseResponse)
async def purchase_material(
    material_id: int,
    current_user: AuthUser = Depends(require_student),
    db: AsyncSession = Depends(get_async_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """Start a purchase; the client completes payment with ``client_secret``."""
    return await purchase_ops.purchase_material(
        db, gateway, student_id=current_user.user_id, material_id=material_id
    )
