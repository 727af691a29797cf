"""Initial asset tracking schema: users, assets, asset status history

Revision ID: 202610190001
Revises:
Create Date: 2026-10-19 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "202610190001"
down_revision = None
branch_labels = None
depends_on = None

user_role_enum = postgresql.ENUM("admin", "manager", "user", name="user_role", create_type=False)

asset_category_enum = postgresql.ENUM(
    "HARDWARE",
    "SOFTWARE",
    "FURNITURE",
    "VEHICLE",
    "OTHER",
    name="asset_category",
    create_type=False,
)

# Shared by assets.status and both history status columns.
asset_status_enum = postgresql.ENUM(
    "AVAILABLE",
    "ASSIGNED",
    "MAINTENANCE",
    "RETIRED",
    "LOST",
    name="asset_status",
    create_type=False,
)


def upgrade() -> None:
    bind = op.get_bind()
    user_role_enum.create(bind, checkfirst=True)
    asset_category_enum.create(bind, checkfirst=True)
    asset_status_enum.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("role", user_role_enum, nullable=False, server_default="user"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "assets",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("serial_number", sa.String(length=128), nullable=True),
        sa.Column("category", asset_category_enum, nullable=False),
        sa.Column("status", asset_status_enum, nullable=False, server_default="AVAILABLE"),
        sa.Column("purchase_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("purchase_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("vendor", sa.String(length=255), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("assignee_id", sa.String(length=36), nullable=True),
        sa.Column("created_by_id", sa.String(length=36), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("id", name="pk_assets"),
        sa.UniqueConstraint("serial_number", name="uq_assets_serial_number"),
        sa.ForeignKeyConstraint(
            ["assignee_id"],
            ["users.id"],
            name="fk_assets_assignee_id_users",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["created_by_id"],
            ["users.id"],
            name="fk_assets_created_by_id_users",
            ondelete="RESTRICT",
        ),
    )
    op.create_index("ix_assets_category", "assets", ["category"])
    op.create_index("ix_assets_status", "assets", ["status"])
    op.create_index("ix_assets_assignee_id", "assets", ["assignee_id"])

    op.create_table(
        "asset_status_history",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("asset_id", sa.String(length=36), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("old_status", asset_status_enum, nullable=False),
        sa.Column("new_status", asset_status_enum, nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("changed_by_id", sa.String(length=36), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("id", name="pk_asset_status_history"),
        sa.UniqueConstraint("asset_id", "sequence", name="uq_asset_status_history_sequence"),
        sa.ForeignKeyConstraint(
            ["asset_id"],
            ["assets.id"],
            name="fk_asset_status_history_asset_id_assets",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["changed_by_id"],
            ["users.id"],
            name="fk_asset_status_history_changed_by_id_users",
            ondelete="RESTRICT",
        ),
    )
    op.create_index(
        "ix_asset_status_history_asset_id", "asset_status_history", ["asset_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_asset_status_history_asset_id", "asset_status_history")
    op.drop_table("asset_status_history")
    op.drop_index("ix_assets_assignee_id", "assets")
    op.drop_index("ix_assets_status", "assets")
    op.drop_index("ix_assets_category", "assets")
    op.drop_table("assets")
    op.drop_index("ix_users_email", "users")
    op.drop_table("users")

    bind = op.get_bind()
    asset_status_enum.drop(bind, checkfirst=True)
    asset_category_enum.drop(bind, checkfirst=True)
    user_role_enum.drop(bind, checkfirst=True)
