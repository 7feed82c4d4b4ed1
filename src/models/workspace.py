"""Workspace models — the tenant boundary for users, groups, and spaces."""

from uuid import UUID

from pydantic import Field, field_validator

from src.models.common import (
    UserRole,
    UTCTimestamp,
    UUIDv7,
    WorkspaceBase,
    new_uuid7,
    utc_now,
)


def _strip_name(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        msg = "name must not be blank"
        raise ValueError(msg)
    return v


class Workspace(WorkspaceBase):
    """A provisioned tenant.

    ``hostname`` is only populated in hosted (cloud) deployments and is
    globally unique when set. ``default_space_id`` points at the "General"
    space created during provisioning.
    """

    workspace_id: UUIDv7 = Field(default_factory=new_uuid7)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    logo: str | None = None
    hostname: str | None = None
    default_role: UserRole = UserRole.MEMBER
    default_space_id: UUID | None = None
    created_at: UTCTimestamp = Field(default_factory=utc_now)
    updated_at: UTCTimestamp = Field(default_factory=utc_now)


class CreateWorkspace(WorkspaceBase):
    """Input for provisioning a new workspace."""

    name: str = Field(..., min_length=1, max_length=64)
    description: str | None = Field(default=None, max_length=250)
    hostname: str | None = Field(
        default=None,
        min_length=1,
        max_length=64,
        description="Hostname candidate overriding the workspace name.",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_name(v)


class UpdateWorkspace(WorkspaceBase):
    """Administrative update; omitted fields are left untouched."""

    name: str | None = Field(default=None, min_length=1, max_length=64)
    description: str | None = Field(default=None, max_length=250)
    logo: str | None = Field(default=None, max_length=500)
    default_space_id: UUID | None = None
    default_role: UserRole | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_name(v)


class AddWorkspaceMember(WorkspaceBase):
    user_id: UUID
    role: UserRole | None = None


class UpdateMemberRole(WorkspaceBase):
    user_id: UUID
    role: UserRole

    @field_validator("role", mode="before")
    @classmethod
    def lower_role(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v


class HostnameCheck(WorkspaceBase):
    hostname: str = Field(..., min_length=1, max_length=100)
