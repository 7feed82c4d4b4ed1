"""Workspace role governance.

Role changes are checked in a fixed order:

1. the target must be a member of the workspace,
2. an ADMIN may neither grant OWNER nor touch an existing OWNER,
3. an unchanged role is a no-op,
4. the sole OWNER cannot be demoted,
5. otherwise the role is updated.

The owner count and the update run in one transaction. With
``lock_workspace`` the workspace row is locked first, so two concurrent
demotions in the same workspace serialize and the second one re-reads the
count after the first commits.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.tables import UserRow
from src.db.transaction import TransactionRunner
from src.models.common import UserRole
from src.repositories.base import RepositoryFactory, WorkspaceRepositories
from src.workspaces.errors import NotFoundError, PermissionDeniedError, ValidationFailedError

logger = logging.getLogger(__name__)

ROLE_MANAGERS = frozenset({UserRole.OWNER, UserRole.ADMIN})


def can_manage_roles(role: str | None) -> bool:
    """Whether a member holding ``role`` may change other members' roles."""
    return role in ROLE_MANAGERS


def _coerce_role(role: UserRole | str) -> UserRole:
    try:
        return UserRole(str(role).lower())
    except ValueError as exc:
        msg = f"Unknown workspace role {role!r}."
        raise ValidationFailedError(msg) from exc


class RoleGovernor:
    def __init__(
        self,
        transactions: TransactionRunner,
        *,
        repositories: RepositoryFactory = WorkspaceRepositories.for_session,
        lock_workspace: bool = True,
    ) -> None:
        self._transactions = transactions
        self._repositories = repositories
        self._lock_workspace = lock_workspace

    async def update_member_role(
        self,
        acting_user: UserRow,
        workspace_id: UUID,
        target_user_id: UUID,
        new_role: UserRole | str,
        session: AsyncSession | None = None,
    ) -> UserRow:
        """Change ``target_user_id``'s workspace role to ``new_role``.

        Returns the target user, unchanged when the role already matches.

        Raises:
            NotFoundError: Target is not a member of the workspace.
            PermissionDeniedError: An ADMIN actor granting or touching OWNER.
            ValidationFailedError: Demoting the sole OWNER, or unknown role.
        """
        role = _coerce_role(new_role)
        actor_role = acting_user.role

        async def unit(s: AsyncSession) -> UserRow:
            repos = self._repositories(s)

            if self._lock_workspace:
                workspace = await repos.workspaces.find_by_id_for_update(workspace_id)
                if workspace is None:
                    raise NotFoundError("Workspace member not found.")

            user = await repos.users.find_by_id(target_user_id, workspace_id)
            if user is None:
                raise NotFoundError("Workspace member not found.")

            if actor_role == UserRole.ADMIN and (
                role == UserRole.OWNER or user.role == UserRole.OWNER
            ):
                raise PermissionDeniedError("Admins cannot grant or modify the owner role.")

            if user.role == role:
                return user

            if user.role == UserRole.OWNER:
                owners = await repos.users.count_by_role_in_workspace(
                    UserRole.OWNER.value, workspace_id,
                )
                if owners <= 1:
                    raise ValidationFailedError("A workspace must always retain at least one owner.")

            previous = user.role
            updated = await repos.users.update_by_id(
                user.user_id, {"role": role.value}, workspace_id,
            )
            logger.info(
                "Workspace %s: user %s role %s -> %s (by %s)",
                workspace_id, target_user_id, previous, role.value, acting_user.user_id,
            )
            return updated or user

        return await self._transactions.run(unit, session)
