"""Unit tests for material/course catalog and purchases."""

from decimal import Decimal

import pytest
from libs.common.errors import NotFoundError, ValidationError
from services.materials_service.models import MaterialPurchase
from services.materials_service.services import catalog_ops, purchase_ops
from services.payments_service.fees import split_fee
from sqlalchemy import select
from tests.factories import CoachFactory, TrainingMaterialFactory, UserFactory, persist


# ---------------------------------------------------------------------------
# split_fee
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_split_fee_fifteen_eighty_five():
    split = split_fee(Decimal("100.00"), Decimal("15"))

    assert split.platform_fee == Decimal("15.00")
    assert split.coach_earnings == Decimal("85.00")


@pytest.mark.unit
@pytest.mark.parametrize("price", ["0", "0.01", "9.99", "19.99", "33.33", "1234.57"])
def test_split_fee_parts_add_up(price):
    split = split_fee(Decimal(price), Decimal("15"))

    assert split.platform_fee + split.coach_earnings == split.price
    assert split.platform_fee == split.platform_fee.quantize(Decimal("0.01"))


@pytest.mark.unit
def test_split_fee_rounds_half_up():
    # 15% of 0.10 is 0.015
    split = split_fee(Decimal("0.10"), Decimal("15"))

    assert split.platform_fee == Decimal("0.02")
    assert split.coach_earnings == Decimal("0.08")


@pytest.mark.unit
def test_split_fee_uses_configured_percent_by_default():
    split = split_fee(Decimal("200"))

    assert split.platform_fee == Decimal("30.00")


# ---------------------------------------------------------------------------
# purchase_material
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_purchase_material_records_snapshot(db_session, payment_gateway, recorded_events):
    student = await persist(db_session, UserFactory.create())
    coach = await persist(db_session, CoachFactory.create())
    material = await persist(
        db_session, TrainingMaterialFactory.create(coach.id, price=Decimal("100.00"))
    )

    result = await purchase_ops.purchase_material(
        db_session, payment_gateway, student_id=student.id, material_id=material.id
    )

    assert result.amount == Decimal("100.00")
    assert result.client_secret == "pi_test_1_secret"
    assert result.payment_ref == "pi_test_1"
    assert payment_gateway.calls == [
        (Decimal("100.00"), "Purchase of Third-shot drop fundamentals")
    ]

    purchase = await db_session.get(MaterialPurchase, result.purchase_id)
    assert purchase.student_id == student.id
    assert purchase.purchase_price == Decimal("100.00")
    assert purchase.platform_fee == Decimal("15.00")
    assert purchase.coach_earnings == Decimal("85.00")
    assert purchase.platform_fee + purchase.coach_earnings == purchase.purchase_price
    assert purchase.external_payment_ref == "pi_test_1"
    assert recorded_events[-1].name == "material.purchased"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_purchase_price_is_a_snapshot(db_session, payment_gateway):
    student = await persist(db_session, UserFactory.create())
    coach = await persist(db_session, CoachFactory.create())
    material = await persist(
        db_session, TrainingMaterialFactory.create(coach.id, price=Decimal("40.00"))
    )
    result = await purchase_ops.purchase_material(
        db_session, payment_gateway, student_id=student.id, material_id=material.id
    )

    material.price = Decimal("80.00")
    await db_session.commit()

    purchase = await db_session.get(MaterialPurchase, result.purchase_id)
    assert purchase.purchase_price == Decimal("40.00")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_purchase_missing_material_never_reaches_gateway(db_session, payment_gateway):
    student = await persist(db_session, UserFactory.create())

    with pytest.raises(NotFoundError, match="Material not found"):
        await purchase_ops.purchase_material(
            db_session, payment_gateway, student_id=student.id, material_id=31337
        )

    assert payment_gateway.calls == []
    rows = await db_session.execute(select(MaterialPurchase))
    assert rows.scalars().all() == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_my_purchases_only_mine(db_session, payment_gateway):
    student = await persist(db_session, UserFactory.create())
    classmate = await persist(db_session, UserFactory.create())
    coach = await persist(db_session, CoachFactory.create())
    material = await persist(db_session, TrainingMaterialFactory.create(coach.id))

    await purchase_ops.purchase_material(
        db_session, payment_gateway, student_id=student.id, material_id=material.id
    )
    await purchase_ops.purchase_material(
        db_session, payment_gateway, student_id=classmate.id, material_id=material.id
    )

    rows = await purchase_ops.list_my_purchases(db_session, student.id)

    assert len(rows) == 1
    purchase, purchased_material = rows[0]
    assert purchase.student_id == student.id
    assert purchased_material.id == material.id


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_course_keeps_material_order(db_session):
    coach = await persist(db_session, CoachFactory.create())
    first = await persist(db_session, TrainingMaterialFactory.create(coach.id, title="Dinks"))
    second = await persist(db_session, TrainingMaterialFactory.create(coach.id, title="Drives"))

    course = await catalog_ops.create_course(
        db_session,
        coach_id=coach.id,
        title="Soft game",
        price=Decimal("150.00"),
        material_ids=[second.id, first.id],
    )

    assert [link.material_id for link in course.course_materials] == [second.id, first.id]
    assert [link.material.title for link in course.course_materials] == ["Drives", "Dinks"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_course_rejects_foreign_materials(db_session):
    coach = await persist(db_session, CoachFactory.create())
    other_coach = await persist(db_session, CoachFactory.create())
    theirs = await persist(db_session, TrainingMaterialFactory.create(other_coach.id))

    with pytest.raises(ValidationError, match="Materials not found"):
        await catalog_ops.create_course(
            db_session,
            coach_id=coach.id,
            title="Borrowed",
            price=Decimal("10"),
            material_ids=[theirs.id],
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_course_can_only_be_purchased_once(db_session, payment_gateway, recorded_events):
    student = await persist(db_session, UserFactory.create())
    coach = await persist(db_session, CoachFactory.create())
    course = await catalog_ops.create_course(
        db_session,
        coach_id=coach.id,
        title="Serve and return",
        price=Decimal("100.00"),
        material_ids=[],
    )

    result = await purchase_ops.purchase_course(
        db_session, payment_gateway, student_id=student.id, course_id=course.id
    )
    assert result.amount == Decimal("100.00")
    assert recorded_events[-1].name == "course.purchased"

    with pytest.raises(ValidationError, match="Course already purchased"):
        await purchase_ops.purchase_course(
            db_session, payment_gateway, student_id=student.id, course_id=course.id
        )
    assert len(payment_gateway.calls) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_get_missing_course(db_session):
    with pytest.raises(NotFoundError, match="Course not found"):
        await catalog_ops.get_course(db_session, 404)
