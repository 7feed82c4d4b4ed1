"""Repository contracts for the workspace persistence layer.

Repositories call add()/flush()/execute() only — never commit().
The transaction runner (or the session dependency) handles commit/rollback
(Unit-of-Work). The core composes these contracts inside one transaction;
tests may substitute fakes by passing a different ``repositories`` factory.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.tables import (
    GroupRow,
    GroupUserRow,
    SpaceMemberRow,
    SpaceRow,
    UserRow,
    WorkspaceRow,
)


class WorkspaceStore(Protocol):
    async def insert(self, *, name: str, hostname: str | None,
                     description: str | None) -> WorkspaceRow: ...

    async def update_by_id(self, workspace_id: UUID,
                           values: dict[str, Any]) -> WorkspaceRow | None: ...

    async def find_by_id(self, workspace_id: UUID) -> WorkspaceRow | None: ...

    async def find_by_id_for_update(self, workspace_id: UUID) -> WorkspaceRow | None: ...

    async def hostname_exists(self, hostname: str) -> bool: ...


class GroupStore(Protocol):
    async def create_default(self, workspace_id: UUID, seed_user_id: UUID) -> GroupRow: ...


class GroupUserStore(Protocol):
    async def insert(self, *, user_id: UUID, group_id: UUID) -> GroupUserRow: ...


class SpaceStore(Protocol):
    async def create(self, *, creator_id: UUID, workspace_id: UUID, name: str,
                     slug: str, description: str | None = None) -> SpaceRow: ...

    async def find_by_id(self, space_id: UUID,
                         workspace_id: UUID | None = None) -> SpaceRow | None: ...


class SpaceMemberStore(Protocol):
    async def add_user(self, *, user_id: UUID, space_id: UUID, role: str,
                       added_by_id: UUID | None = None) -> SpaceMemberRow: ...

    async def add_group(self, *, group_id: UUID, space_id: UUID, role: str,
                        added_by_id: UUID | None = None) -> SpaceMemberRow: ...


class UserStore(Protocol):
    async def update_by_id(self, user_id: UUID, values: dict[str, Any],
                           workspace_id: UUID | None = None) -> UserRow | None: ...

    async def find_by_id(self, user_id: UUID,
                         workspace_id: UUID | None = None) -> UserRow | None: ...

    async def count_by_role_in_workspace(self, role: str, workspace_id: UUID) -> int: ...


@dataclass(slots=True)
class WorkspaceRepositories:
    """The stores the workspace core composes inside one transaction."""

    workspaces: WorkspaceStore
    groups: GroupStore
    group_users: GroupUserStore
    spaces: SpaceStore
    space_members: SpaceMemberStore
    users: UserStore

    @classmethod
    def for_session(cls, session: AsyncSession) -> "WorkspaceRepositories":
        from src.repositories.groups import GroupRepository, GroupUserRepository
        from src.repositories.spaces import SpaceMemberRepository, SpaceRepository
        from src.repositories.users import UserRepository
        from src.repositories.workspace import WorkspaceRepository

        return cls(
            workspaces=WorkspaceRepository(session),
            groups=GroupRepository(session),
            group_users=GroupUserRepository(session),
            spaces=SpaceRepository(session),
            space_members=SpaceMemberRepository(session),
            users=UserRepository(session),
        )


RepositoryFactory = Callable[[AsyncSession], WorkspaceRepositories]
