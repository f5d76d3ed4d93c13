import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base, enum_values
from services.materials_service.models.enums import MaterialContentType
from sqlalchemy import Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, Numeric, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# CATALOG
# ============================================================================


class TrainingMaterial(Base):
    """A piece of paid coaching content published by a coach."""

    __tablename__ = "training_materials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    coach_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), index=True, nullable=False
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content_type: Mapped[MaterialContentType] = mapped_column(
        SAEnum(
            MaterialContentType,
            name="material_content_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=MaterialContentType.TEXT,
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    video_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    external_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    is_published: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<TrainingMaterial {self.id} {self.title}>"


class Course(Base):
    """An ordered bundle of one coach's materials sold at a single price."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    coach_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    course_materials = relationship(
        "CourseMaterial",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseMaterial.sort_order",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Course {self.id} {self.title}>"


class CourseMaterial(Base):
    """Junction table for course-material membership."""

    __tablename__ = "course_materials"

    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True
    )
    material_id: Mapped[int] = mapped_column(
        ForeignKey("training_materials.id", ondelete="CASCADE"), primary_key=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    course = relationship("Course", back_populates="course_materials")
    material = relationship("TrainingMaterial", lazy="selectin")


# ============================================================================
# PURCHASES
# ============================================================================


class MaterialPurchase(Base):
    """Snapshot of a material sale. Never edited after creation."""

    __tablename__ = "material_purchases"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    material_id: Mapped[int] = mapped_column(
        ForeignKey("training_materials.id", ondelete="RESTRICT"), index=True, nullable=False
    )

    # Copied from the material when the purchase happens
    purchase_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    platform_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    coach_earnings: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    external_payment_ref: Mapped[str] = mapped_column(String(255), nullable=False)
    purchased_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    def __repr__(self):
        return f"<MaterialPurchase {self.id} material={self.material_id}>"


class CoursePurchase(Base):
    """Snapshot of a course sale. A student buys a course at most once."""

    __tablename__ = "course_purchases"
    __table_args__ = (
        UniqueConstraint("course_id", "student_id", name="uq_course_purchase_student"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="RESTRICT"), index=True, nullable=False
    )

    purchase_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    platform_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    coach_earnings: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    external_payment_ref: Mapped[str] = mapped_column(String(255), nullable=False)
    purchased_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    def __repr__(self):
        return f"<CoursePurchase {self.id} course={self.course_id}>"
