"""Initial schema - role, permission, role_permission and the permission catalog.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence
from uuid import uuid4

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

PERMISSION_CATALOG = [
    ("role:read", "View roles"),
    ("role:save", "Create, edit and delete roles"),
    ("permission:read", "View the permission catalog"),
    ("user:read", "View users"),
    ("user:save", "Create, edit and delete users"),
]


def upgrade() -> None:
    op.create_table(
        "role",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("role_code", sa.String(50), nullable=False),
        sa.Column("role_name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    )
    # Codes of deleted roles may be reused.
    op.create_index(
        "ix_role_role_code_live",
        "role",
        ["role_code"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
    )
    op.create_index("ix_role_deleted_at", "role", ["deleted_at"])

    permission = op.create_table(
        "permission",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("permission_code", sa.String(50), nullable=False),
        sa.Column("description", sa.String(255), nullable=False),
    )
    op.create_index("ix_permission_permission_code", "permission", ["permission_code"], unique=True)

    op.create_table(
        "role_permission",
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
        sa.Column(
            "permission_code",
            sa.String(50),
            sa.ForeignKey("permission.permission_code"),
            primary_key=True,
        ),
        sa.Column("role_code", sa.String(50), nullable=False),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
    )

    op.bulk_insert(
        permission,
        [
            {"id": uuid4(), "permission_code": code, "description": description}
            for code, description in PERMISSION_CATALOG
        ],
    )


def downgrade() -> None:
    op.drop_table("role_permission")
    op.drop_index("ix_permission_permission_code", table_name="permission")
    op.drop_table("permission")
    op.drop_index("ix_role_deleted_at", table_name="role")
    op.drop_index("ix_role_role_code_live", table_name="role")
    op.drop_table("role")
