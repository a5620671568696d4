"""initial schema: users, vkm, user_favorites

Revision ID: 5b7e0c2d9a41
Revises:
Create Date: 2025-10-14 09:00:00.000000
"""

from __future__ import annotations

from typing import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "5b7e0c2d9a41"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("username", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("firstname", sa.String(length=100), nullable=False),
        sa.Column("lastname", sa.String(length=100), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column(
            "role",
            sa.String(length=16),
            nullable=False,
            server_default="student",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index(
        "uq_users_username_lower",
        "users",
        [sa.text("lower(username)")],
        unique=True,
    )

    op.create_table(
        "vkm",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("legacy_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("short_description", sa.String(length=500), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("study_credit", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=False),
        sa.Column("contact_id", sa.String(length=64), nullable=False),
        sa.Column("level", sa.String(length=32), nullable=False),
        sa.Column("learning_outcomes", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=True,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=True,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_vkm_study_credit", "vkm", ["study_credit"])
    op.create_index("ix_vkm_location", "vkm", ["location"])
    op.create_index("ix_vkm_level", "vkm", ["level"])
    op.create_index("ix_vkm_is_active", "vkm", ["is_active"])

    op.create_table(
        "user_favorites",
        sa.Column(
            "user_id",
            sa.String(length=32),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("vkm_id", sa.String(length=32), primary_key=True),
        sa.Column(
            "added_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_user_favorites_vkm_id", "user_favorites", ["vkm_id"])


def downgrade() -> None:
    op.drop_index("ix_user_favorites_vkm_id", table_name="user_favorites")
    op.drop_table("user_favorites")
    op.drop_index("ix_vkm_is_active", table_name="vkm")
    op.drop_index("ix_vkm_level", table_name="vkm")
    op.drop_index("ix_vkm_location", table_name="vkm")
    op.drop_index("ix_vkm_study_credit", table_name="vkm")
    op.drop_table("vkm")
    op.drop_index("uq_users_username_lower", table_name="users")
    op.drop_table("users")
