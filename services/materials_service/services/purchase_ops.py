"""Material and course purchases.

A purchase asks the payment gateway for an intent first and records the sale
snapshot (price, platform fee, coach earnings, payment reference) as soon as
the intent exists. Payment completion happens client-side.
"""

import uuid
from dataclasses import dataclass
from decimal import Decimal

from libs.common.errors import ValidationError
from libs.common.events import DomainEvent, get_event_bus
from libs.common.logging import get_logger
from services.materials_service.models import (
    CoursePurchase,
    MaterialPurchase,
    TrainingMaterial,
)
from services.materials_service.services.catalog_ops import get_course, get_material
from services.payments_service.fees import split_fee
from services.payments_service.gateway import PaymentGateway
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

COURSE_ALREADY_PURCHASED = "Course already purchased"


@dataclass(frozen=True)
class PurchaseResult:
    purchase_id: uuid.UUID
    client_secret: str
    payment_ref: str
    amount: Decimal


async def _publish(name: str, entity_type: str, purchase, student_id: int, **payload) -> None:
    await get_event_bus().publish(
        DomainEvent(
            name=name,
            entity_type=entity_type,
            entity_id=str(purchase.id),
            actor_id=student_id,
            payload={
                "purchase_price": str(purchase.purchase_price),
                "platform_fee": str(purchase.platform_fee),
                "coach_earnings": str(purchase.coach_earnings),
                **payload,
            },
        )
    )


async def purchase_material(
    db: AsyncSession,
    gateway: PaymentGateway,
    *,
    student_id: int,
    material_id: int,
) -> PurchaseResult:
    material = await get_material(db, material_id)
    intent = await gateway.create_payment_intent(
        material.price, f"Purchase of {material.title}"
    )
    split = split_fee(material.price)

    purchase = MaterialPurchase(
        student_id=student_id,
        material_id=material.id,
        purchase_price=split.price,
        platform_fee=split.platform_fee,
        coach_earnings=split.coach_earnings,
        external_payment_ref=intent.id,
    )
    db.add(purchase)
    await db.commit()
    await db.refresh(purchase)

    logger.info(
        "Material %s purchased by student %s (purchase %s, payment %s)",
        material.id,
        student_id,
        purchase.id,
        intent.id,
    )
    await _publish(
        "material.purchased",
        "material_purchase",
        purchase,
        student_id,
        material_id=material.id,
        coach_id=material.coach_id,
    )
    return PurchaseResult(
        purchase_id=purchase.id,
        client_secret=intent.client_secret,
        payment_ref=intent.id,
        amount=split.price,
    )


async def list_my_purchases(
    db: AsyncSession, student_id: int
) -> list[tuple[MaterialPurchase, TrainingMaterial]]:
    """The student's material purchases with their materials, newest first."""
    result = await db.execute(
        select(MaterialPurchase, TrainingMaterial)
        .join(TrainingMaterial, TrainingMaterial.id == MaterialPurchase.material_id)
        .where(MaterialPurchase.student_id == student_id)
        .order_by(MaterialPurchase.purchased_at.desc())
    )
    return [(purchase, material) for purchase, material in result.all()]


async def purchase_course(
    db: AsyncSession,
    gateway: PaymentGateway,
    *,
    student_id: int,
    course_id: int,
) -> PurchaseResult:
    course = await get_course(db, course_id)
    existing = await db.execute(
        select(CoursePurchase.id).where(
            CoursePurchase.course_id == course.id,
            CoursePurchase.student_id == student_id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ValidationError(COURSE_ALREADY_PURCHASED)

    intent = await gateway.create_payment_intent(
        course.price, f"Purchase of course {course.title}"
    )
    split = split_fee(course.price)

    purchase = CoursePurchase(
        student_id=student_id,
        course_id=course.id,
        purchase_price=split.price,
        platform_fee=split.platform_fee,
        coach_earnings=split.coach_earnings,
        external_payment_ref=intent.id,
    )
    db.add(purchase)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent purchase of the same course won the unique constraint.
        await db.rollback()
        raise ValidationError(COURSE_ALREADY_PURCHASED) from None
    await db.refresh(purchase)

    logger.info(
        "Course %s purchased by student %s (purchase %s, payment %s)",
        course.id,
        student_id,
        purchase.id,
        intent.id,
    )
    await _publish(
        "course.purchased",
        "course_purchase",
        purchase,
        student_id,
        course_id=course.id,
        coach_id=course.coach_id,
    )
    return PurchaseResult(
        purchase_id=purchase.id,
        client_secret=intent.client_secret,
        payment_ref=intent.id,
        amount=split.price,
    )
