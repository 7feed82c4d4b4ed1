"""Initial schema — workspaces, users, groups, spaces and memberships.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # -- Tenant --
    op.create_table(
        "workspaces",
        sa.Column("workspace_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("logo", sa.String(500), nullable=True),
        sa.Column("hostname", sa.String(100), nullable=True, unique=True),
        sa.Column("default_role", sa.String(50), server_default="member", nullable=False),
        sa.Column("default_space_id", UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    # -- Membership --
    op.create_table(
        "users",
        sa.Column("user_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("workspace_id", UUID(as_uuid=True),
                  sa.ForeignKey("workspaces.workspace_id"), nullable=True),
        sa.Column("role", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("email", "workspace_id", name="uq_users_email_workspace"),
    )
    op.create_index("ix_users_workspace_id", "users", ["workspace_id"])

    op.create_table(
        "groups",
        sa.Column("group_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("workspace_id", UUID(as_uuid=True),
                  sa.ForeignKey("workspaces.workspace_id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_default", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("creator_id", UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("name", "workspace_id", name="uq_groups_name_workspace"),
    )
    op.create_index("ix_groups_workspace_id", "groups", ["workspace_id"])

    op.create_table(
        "group_users",
        sa.Column("user_id", UUID(as_uuid=True),
                  sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("group_id", UUID(as_uuid=True),
                  sa.ForeignKey("groups.group_id"), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "spaces",
        sa.Column("space_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("workspace_id", UUID(as_uuid=True),
                  sa.ForeignKey("workspaces.workspace_id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("creator_id", UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("slug", "workspace_id", name="uq_spaces_slug_workspace"),
    )
    op.create_index("ix_spaces_workspace_id", "spaces", ["workspace_id"])

    op.create_table(
        "space_members",
        sa.Column("space_member_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("space_id", UUID(as_uuid=True),
                  sa.ForeignKey("spaces.space_id"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True),
                  sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("group_id", UUID(as_uuid=True),
                  sa.ForeignKey("groups.group_id"), nullable=True),
        sa.Column("role", sa.String(50), nullable=False),
        sa.Column("added_by_id", UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("space_id", "user_id", name="uq_space_members_space_user"),
        sa.UniqueConstraint("space_id", "group_id", name="uq_space_members_space_group"),
    )
    op.create_index("ix_space_members_space_id", "space_members", ["space_id"])


def downgrade() -> None:
    op.drop_index("ix_space_members_space_id", table_name="space_members")
    op.drop_table("space_members")
    op.drop_index("ix_spaces_workspace_id", table_name="spaces")
    op.drop_table("spaces")
    op.drop_table("group_users")
    op.drop_index("ix_groups_workspace_id", table_name="groups")
    op.drop_table("groups")
    op.drop_index("ix_users_workspace_id", table_name="users")
    op.drop_table("users")
    op.drop_table("workspaces")
