"""Group and group-membership repositories."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.tables import GroupRow, GroupUserRow
from src.models.common import new_uuid7, utc_now

DEFAULT_GROUP_NAME = "Everyone"
DEFAULT_GROUP_DESCRIPTION = "Group for all users in this workspace."


class GroupRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_default(self, workspace_id: UUID, seed_user_id: UUID) -> GroupRow:
        """Create the workspace's default group, owned by ``seed_user_id``."""
        now = utc_now()
        row = GroupRow(
            group_id=new_uuid7(), workspace_id=workspace_id,
            name=DEFAULT_GROUP_NAME, description=DEFAULT_GROUP_DESCRIPTION,
            is_default=True, creator_id=seed_user_id,
            created_at=now, updated_at=now,
        )
        self._session.add(row)
        await self._session.flush()
        return row


class GroupUserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(self, *, user_id: UUID, group_id: UUID) -> GroupUserRow:
        row = GroupUserRow(user_id=user_id, group_id=group_id, created_at=utc_now())
        self._session.add(row)
        await self._session.flush()
        return row
