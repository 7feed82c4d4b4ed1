"""Workspace provisioning — create a tenant with its default wiring.

One ``create`` call inserts, inside a single transaction:

1. the workspace row (with a unique hostname in cloud mode),
2. the default group, owned by the requesting user,
3. the requesting user's workspace attachment as OWNER,
4. the user's membership of the default group,
5. the default "General" space,
6. space memberships: the user as ADMIN, the default group as WRITER,
7. the workspace's ``default_space_id``.

Any failure rolls every step back; a partial tenant is never visible.
A uniqueness violation on insert (two creations racing for the same
hostname) is retried with a fresh allocation when this call owns the
transaction.
"""

import logging
import random
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import Settings
from src.db.tables import UserRow
from src.db.transaction import TransactionRunner
from src.models.common import SpaceRole, UserRole
from src.models.workspace import CreateWorkspace, UpdateWorkspace, Workspace
from src.repositories.base import RepositoryFactory, WorkspaceRepositories
from src.workspaces.errors import ConflictError, NotFoundError, ValidationFailedError
from src.workspaces.hostname import DEFAULT_MAX_ATTEMPTS, HostnameAllocator

logger = logging.getLogger(__name__)

DEFAULT_SPACE_NAME = "General"
DEFAULT_SPACE_SLUG = "general"
DEFAULT_PROVISION_ATTEMPTS = 5


def _validate(model: type[CreateWorkspace] | type[UpdateWorkspace], data: Any) -> Any:
    if isinstance(data, model):
        return data
    try:
        if isinstance(data, Mapping):
            return model.model_validate(dict(data))
        return model.model_validate(data, from_attributes=True)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "input"
        msg = f"Invalid {field}: {first['msg']}"
        raise ValidationFailedError(msg) from exc


class WorkspaceProvisioner:
    """Creates workspaces and attaches users to them.

    Args:
        transactions: Runs each unit of work atomically.
        cloud: Hosted multi-tenant mode; enables hostname allocation.
        repositories: Builds the session-bound stores.
        rng: Randomness source for hostname suffixes.
        hostname_attempts: Suffix attempts per allocation.
        max_attempts: Whole-transaction attempts on a store conflict.
    """

    def __init__(
        self,
        transactions: TransactionRunner,
        *,
        cloud: bool = False,
        repositories: RepositoryFactory = WorkspaceRepositories.for_session,
        rng: random.Random | None = None,
        hostname_attempts: int = DEFAULT_MAX_ATTEMPTS,
        max_attempts: int = DEFAULT_PROVISION_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            msg = "max_attempts must be >= 1"
            raise ValueError(msg)
        self._transactions = transactions
        self._cloud = cloud
        self._repositories = repositories
        self._rng = rng or random.Random()
        self._hostname_attempts = hostname_attempts
        self._max_attempts = max_attempts

    @classmethod
    def from_settings(
        cls, transactions: TransactionRunner, settings: Settings, **kwargs: Any,
    ) -> "WorkspaceProvisioner":
        return cls(
            transactions,
            cloud=settings.CLOUD,
            hostname_attempts=settings.HOSTNAME_MAX_ATTEMPTS,
            max_attempts=settings.PROVISION_MAX_ATTEMPTS,
            **kwargs,
        )

    # ----- Provisioning -----

    async def create(
        self,
        user_id: UUID,
        data: CreateWorkspace | Mapping[str, Any],
        session: AsyncSession | None = None,
    ) -> Workspace:
        """Provision a workspace owned by ``user_id``.

        Raises:
            ValidationFailedError: Invalid input (before any transaction opens),
                or the requester already belongs to a workspace.
            NotFoundError: The requesting user does not exist.
            AllocationExhaustedError: No unique hostname could be found.
            ConflictError: The store rejected the tenant on every attempt.
        """
        payload: CreateWorkspace = _validate(CreateWorkspace, data)

        # A joined transaction is unusable after a failed flush; only retry
        # when each attempt gets its own transaction.
        retryable = self._cloud and not self._transactions.joins(session)
        attempts = self._max_attempts if retryable else 1

        async def unit(s: AsyncSession) -> Workspace:
            return await self._provision(s, user_id, payload)

        last_error: IntegrityError | None = None
        for attempt in range(1, attempts + 1):
            try:
                workspace = await self._transactions.run(unit, session)
            except IntegrityError as exc:
                last_error = exc
                logger.warning(
                    "Workspace %r conflicted on insert (attempt %d/%d)",
                    payload.name, attempt, attempts,
                )
                continue
            logger.info(
                "Provisioned workspace %s (%r, hostname=%s) for user %s",
                workspace.workspace_id, workspace.name, workspace.hostname, user_id,
            )
            return workspace

        msg = f"Workspace {payload.name!r} conflicts with an existing workspace."
        raise ConflictError(msg) from last_error

    async def _provision(
        self, session: AsyncSession, user_id: UUID, payload: CreateWorkspace,
    ) -> Workspace:
        repos = self._repositories(session)

        user = await repos.users.find_by_id(user_id)
        if user is None:
            msg = f"User {user_id} not found."
            raise NotFoundError(msg)
        if user.workspace_id is not None:
            msg = f"User {user_id} already belongs to workspace {user.workspace_id}."
            raise ValidationFailedError(msg)

        hostname: str | None = None
        if self._cloud:
            allocator = HostnameAllocator(
                repos.workspaces, rng=self._rng, max_attempts=self._hostname_attempts,
            )
            hostname = await allocator.allocate(payload.hostname or payload.name)

        workspace = await repos.workspaces.insert(
            name=payload.name, hostname=hostname, description=payload.description,
        )
        workspace_id = workspace.workspace_id

        group = await repos.groups.create_default(workspace_id, user_id)

        await repos.users.update_by_id(
            user_id, {"workspace_id": workspace_id, "role": UserRole.OWNER.value},
        )

        await repos.group_users.insert(user_id=user_id, group_id=group.group_id)

        space = await repos.spaces.create(
            creator_id=user_id, workspace_id=workspace_id,
            name=DEFAULT_SPACE_NAME, slug=DEFAULT_SPACE_SLUG,
        )

        await repos.space_members.add_user(
            user_id=user_id, space_id=space.space_id,
            role=SpaceRole.ADMIN.value, added_by_id=user_id,
        )
        await repos.space_members.add_group(
            group_id=group.group_id, space_id=space.space_id,
            role=SpaceRole.WRITER.value, added_by_id=user_id,
        )

        updated = await repos.workspaces.update_by_id(
            workspace_id, {"default_space_id": space.space_id},
        )
        return Workspace.model_validate(updated or workspace)

    # ----- Membership -----

    async def add_user_to_workspace(
        self,
        user_id: UUID,
        workspace_id: UUID,
        role: UserRole | str | None = None,
        session: AsyncSession | None = None,
    ) -> UserRow:
        """Attach a user with ``role``, or the workspace's default role.

        Raises:
            NotFoundError: Unknown workspace or user.
            ValidationFailedError: Unknown role, or the user already belongs to
                a workspace.
        """
        assigned: UserRole | None = None
        if role is not None:
            try:
                assigned = UserRole(str(role).lower())
            except ValueError as exc:
                msg = f"Unknown workspace role {role!r}."
                raise ValidationFailedError(msg) from exc

        async def unit(s: AsyncSession) -> UserRow:
            repos = self._repositories(s)
            workspace = await repos.workspaces.find_by_id(workspace_id)
            if workspace is None:
                msg = f"Workspace {workspace_id} not found."
                raise NotFoundError(msg)

            user = await repos.users.find_by_id(user_id)
            if user is None:
                msg = f"User {user_id} not found."
                raise NotFoundError(msg)
            # One workspace per user; role changes go through RoleGovernor.
            if user.workspace_id is not None:
                msg = f"User {user_id} already belongs to workspace {user.workspace_id}."
                raise ValidationFailedError(msg)

            effective = assigned.value if assigned is not None else workspace.default_role
            user = await repos.users.update_by_id(
                user_id, {"role": effective, "workspace_id": workspace_id},
            ) or user
            logger.info("Added user %s to workspace %s as %s", user_id, workspace_id, effective)
            return user

        return await self._transactions.run(unit, session)

    # ----- Administration -----

    async def update(
        self,
        workspace_id: UUID,
        data: UpdateWorkspace | Mapping[str, Any],
        session: AsyncSession | None = None,
    ) -> Workspace:
        """Apply an administrative update (name, logo, default space, ...)."""
        payload: UpdateWorkspace = _validate(UpdateWorkspace, data)
        values = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "default_role" in values:
            values["default_role"] = UserRole(values["default_role"]).value

        async def unit(s: AsyncSession) -> Workspace:
            repos = self._repositories(s)
            workspace = await repos.workspaces.find_by_id(workspace_id)
            if workspace is None:
                msg = f"Workspace {workspace_id} not found."
                raise NotFoundError(msg)

            space_id = values.get("default_space_id")
            if space_id is not None:
                space = await repos.spaces.find_by_id(space_id, workspace_id)
                if space is None:
                    msg = f"Space {space_id} does not belong to workspace {workspace_id}."
                    raise ValidationFailedError(msg)

            if values:
                workspace = await repos.workspaces.update_by_id(workspace_id, values) or workspace
            return Workspace.model_validate(workspace)

        return await self._transactions.run(unit, session)
