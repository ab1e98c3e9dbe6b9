"""Initial schema - resource, permission, role_permission, user_permission.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

from hrauthz.domain.defaults import RESOURCES, ROLE_GRANTS

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    resource = op.create_table(
        "resource",
        sa.Column("name", sa.String(100), primary_key=True),
        sa.Column("label", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    permission = op.create_table(
        "permission",
        sa.Column("resource", sa.String(100), sa.ForeignKey("resource.name"), primary_key=True),
        sa.Column("action", sa.String(20), primary_key=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("deprecated", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    role_permission = op.create_table(
        "role_permission",
        sa.Column("role", sa.String(20), primary_key=True),
        sa.Column("resource", sa.String(100), primary_key=True),
        sa.Column("action", sa.String(20), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ["resource", "action"], ["permission.resource", "permission.action"]
        ),
    )

    op.create_table(
        "user_permission",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("resource", sa.String(100), nullable=False),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("granted", sa.Boolean(), nullable=False),
        sa.Column("granted_by", sa.String(255), nullable=False),
        sa.Column("granted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["resource", "action"], ["permission.resource", "permission.action"]
        ),
    )
    op.create_index(
        "ix_user_permission_key", "user_permission", ["user_id", "resource", "action"]
    )
    op.create_index("ix_user_permission_expires_at", "user_permission", ["expires_at"])

    op.bulk_insert(
        resource,
        [{"name": r.name, "label": r.label, "description": r.description} for r in RESOURCES],
    )
    op.bulk_insert(
        permission,
        [
            {
                "resource": r.name,
                "action": action,
                "description": f"{action.capitalize()} access to {r.label}",
                "deprecated": False,
            }
            for r in RESOURCES
            for action in r.actions
        ],
    )
    op.bulk_insert(
        role_permission,
        [
            {"role": role, "resource": resource_name, "action": action}
            for role, by_resource in ROLE_GRANTS.items()
            for resource_name, actions in by_resource.items()
            for action in actions
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_user_permission_expires_at", table_name="user_permission")
    op.drop_index("ix_user_permission_key", table_name="user_permission")
    op.drop_table("user_permission")
    op.drop_table("role_permission")
    op.drop_table("permission")
    op.drop_table("resource")
