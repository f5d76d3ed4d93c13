"""asset metadata

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 10:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, Sequence[str], None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema - uploaded asset metadata with soft delete."""
    op.create_table(
        "assets",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("asset_key", sa.String(length=255), nullable=False),
        sa.Column("url", sa.String(length=500), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("original_file_name", sa.String(length=255), nullable=True),
        sa.Column("content_type", sa.String(length=100), nullable=True),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("object_type", sa.String(length=100), nullable=True),
        sa.Column("object_id", sa.Integer(), nullable=True),
        sa.Column("uploaded_by_user_id", sa.Integer(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["uploaded_by_user_id"],
            ["users.id"],
            name=op.f("fk_assets_uploaded_by_user_id_users"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_assets")),
        sa.UniqueConstraint("asset_key", name=op.f("uq_assets_asset_key")),
    )
    op.create_index(op.f("ix_assets_url"), "assets", ["url"], unique=False)
    op.create_index(op.f("ix_assets_category"), "assets", ["category"], unique=False)
    op.create_index(
        op.f("ix_assets_uploaded_by_user_id"), "assets", ["uploaded_by_user_id"], unique=False
    )
    op.create_index(
        "ix_assets_object", "assets", ["object_type", "object_id"], unique=False
    )


def downgrade() -> None:
    """Downgrade schema - drop asset metadata."""
    op.drop_index("ix_assets_object", table_name="assets")
    op.drop_table("assets")
