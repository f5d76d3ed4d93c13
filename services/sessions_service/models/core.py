from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base, enum_values
from services.sessions_service.models.enums import SessionStatus
from sqlalchemy import DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

DEFAULT_SESSION_TYPE = "Online"
DEFAULT_DURATION_MINUTES = 60


class TrainingSession(Base):
    """A one-on-one training session between a coach and a student.

    Sessions enter either as a student request (pending, priced at the
    coach's hourly rate until confirmed) or directly as confirmed bookings.
    """

    __tablename__ = "training_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    coach_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    student_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    material_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("training_materials.id", ondelete="SET NULL"), nullable=True
    )

    session_type: Mapped[str] = mapped_column(
        String(50), nullable=False, default=DEFAULT_SESSION_TYPE
    )
    requested_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    scheduled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    duration_minutes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_DURATION_MINUTES
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)

    status: Mapped[SessionStatus] = mapped_column(
        SAEnum(
            SessionStatus,
            name="session_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=SessionStatus.PENDING,
        index=True,
    )

    meeting_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    def __repr__(self):
        return f"<TrainingSession {self.id} {self.status.value}>"
