"""Shared types, enums, and base models used across workspace domain models."""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field
from uuid_extensions import uuid7


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def new_uuid7() -> UUID:
    """Generate a new time-sortable UUID v7."""
    return uuid7()


# --- Reusable annotated types ---

UUIDv7 = Annotated[UUID, Field(description="Time-sortable UUID v7.")]
UTCTimestamp = Annotated[
    datetime, Field(description="UTC timezone-aware timestamp.")
]


# --- Shared enums ---


class UserRole(StrEnum):
    """Workspace-scoped role. OWNER > ADMIN > MEMBER."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class SpaceRole(StrEnum):
    """Space-scoped membership role, distinct from the workspace role."""

    ADMIN = "admin"
    WRITER = "writer"
    READER = "reader"


# --- Base model ---


class WorkspaceBase(BaseModel):
    """Base model with common configuration for all workspace Pydantic models."""

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
        "protected_namespaces": (),
    }
