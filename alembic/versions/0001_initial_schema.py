"""initial marketplace schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role_enum = sa.Enum("student", "coach", "admin", name="user_role_enum")
review_status_enum = sa.Enum(
    "open", "accepted", "completed", "cancelled", name="review_status_enum"
)
session_status_enum = sa.Enum(
    "pending", "confirmed", "cancelled", name="session_status_enum"
)
material_content_type_enum = sa.Enum(
    "text", "video", "link", "document", name="material_content_type_enum"
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _user_fk(column: str, table: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        [column],
        ["users.id"],
        name=op.f(f"fk_{table}_{column}_users"),
        ondelete="RESTRICT",
    )


def upgrade() -> None:
    """Upgrade schema - users, review requests, materials, courses, sessions."""

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("profile_image_url", sa.String(length=500), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_role"), "users", ["role"], unique=False)

    op.create_table(
        "video_review_requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("coach_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("video_url", sa.String(length=500), nullable=False),
        sa.Column("offered_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", review_status_enum, nullable=False),
        sa.Column("accepted_by_coach_id", sa.Integer(), nullable=True),
        sa.Column("review_video_url", sa.String(length=500), nullable=True),
        sa.Column("review_notes", sa.Text(), nullable=True),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        _user_fk("student_id", "video_review_requests"),
        _user_fk("coach_id", "video_review_requests"),
        _user_fk("accepted_by_coach_id", "video_review_requests"),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_video_review_requests")),
    )
    for column in ("student_id", "coach_id", "status"):
        op.create_index(
            op.f(f"ix_video_review_requests_{column}"),
            "video_review_requests",
            [column],
            unique=False,
        )

    op.create_table(
        "training_materials",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("coach_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("content_type", material_content_type_enum, nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("video_url", sa.String(length=500), nullable=True),
        sa.Column("thumbnail_url", sa.String(length=500), nullable=True),
        sa.Column("external_link", sa.String(length=500), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        *_timestamps(),
        _user_fk("coach_id", "training_materials"),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_training_materials")),
    )
    op.create_index(
        op.f("ix_training_materials_coach_id"), "training_materials", ["coach_id"]
    )

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("coach_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("thumbnail_url", sa.String(length=500), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        *_timestamps(),
        _user_fk("coach_id", "courses"),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_courses")),
    )
    op.create_index(op.f("ix_courses_coach_id"), "courses", ["coach_id"])

    op.create_table(
        "course_materials",
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("material_id", sa.Integer(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["course_id"],
            ["courses.id"],
            name=op.f("fk_course_materials_course_id_courses"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["material_id"],
            ["training_materials.id"],
            name=op.f("fk_course_materials_material_id_training_materials"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint(
            "course_id", "material_id", name=op.f("pk_course_materials")
        ),
    )

    op.create_table(
        "material_purchases",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("material_id", sa.Integer(), nullable=False),
        sa.Column("purchase_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("platform_fee", sa.Numeric(10, 2), nullable=False),
        sa.Column("coach_earnings", sa.Numeric(10, 2), nullable=False),
        sa.Column("external_payment_ref", sa.String(length=255), nullable=False),
        sa.Column("purchased_at", sa.DateTime(timezone=True), nullable=True),
        _user_fk("student_id", "material_purchases"),
        sa.ForeignKeyConstraint(
            ["material_id"],
            ["training_materials.id"],
            name=op.f("fk_material_purchases_material_id_training_materials"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_material_purchases")),
    )
    op.create_index(
        op.f("ix_material_purchases_student_id"), "material_purchases", ["student_id"]
    )
    op.create_index(
        op.f("ix_material_purchases_material_id"), "material_purchases", ["material_id"]
    )

    op.create_table(
        "course_purchases",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("purchase_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("platform_fee", sa.Numeric(10, 2), nullable=False),
        sa.Column("coach_earnings", sa.Numeric(10, 2), nullable=False),
        sa.Column("external_payment_ref", sa.String(length=255), nullable=False),
        sa.Column("purchased_at", sa.DateTime(timezone=True), nullable=True),
        _user_fk("student_id", "course_purchases"),
        sa.ForeignKeyConstraint(
            ["course_id"],
            ["courses.id"],
            name=op.f("fk_course_purchases_course_id_courses"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_course_purchases")),
        sa.UniqueConstraint(
            "course_id", "student_id", name="uq_course_purchase_student"
        ),
    )
    op.create_index(
        op.f("ix_course_purchases_student_id"), "course_purchases", ["student_id"]
    )
    op.create_index(
        op.f("ix_course_purchases_course_id"), "course_purchases", ["course_id"]
    )

    op.create_table(
        "training_sessions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("coach_id", sa.Integer(), nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("material_id", sa.Integer(), nullable=True),
        sa.Column("session_type", sa.String(length=50), nullable=False),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", session_status_enum, nullable=False),
        sa.Column("meeting_link", sa.String(length=500), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        _user_fk("coach_id", "training_sessions"),
        _user_fk("student_id", "training_sessions"),
        sa.ForeignKeyConstraint(
            ["material_id"],
            ["training_materials.id"],
            name=op.f("fk_training_sessions_material_id_training_materials"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_training_sessions")),
    )
    for column in ("coach_id", "student_id", "scheduled_at", "status"):
        op.create_index(
            op.f(f"ix_training_sessions_{column}"),
            "training_sessions",
            [column],
            unique=False,
        )


def downgrade() -> None:
    """Downgrade schema - drop everything created above."""
    op.drop_table("training_sessions")
    op.drop_table("course_purchases")
    op.drop_table("material_purchases")
    op.drop_table("course_materials")
    op.drop_table("courses")
    op.drop_table("training_materials")
    op.drop_table("video_review_requests")
    op.drop_table("users")

    bind = op.get_bind()
    for enum in (
        session_status_enum,
        material_content_type_enum,
        review_status_enum,
        user_role_enum,
    ):
        enum.drop(bind, checkfirst=True)
