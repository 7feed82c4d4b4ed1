"""Space and space-membership repositories."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.tables import SpaceMemberRow, SpaceRow
from src.models.common import new_uuid7, utc_now


class SpaceRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, creator_id: UUID, workspace_id: UUID, name: str,
                     slug: str, description: str | None = None) -> SpaceRow:
        now = utc_now()
        row = SpaceRow(
            space_id=new_uuid7(), workspace_id=workspace_id, name=name,
            slug=slug.lower(), description=description, creator_id=creator_id,
            created_at=now, updated_at=now,
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def find_by_id(self, space_id: UUID,
                         workspace_id: UUID | None = None) -> SpaceRow | None:
        stmt = select(SpaceRow).where(SpaceRow.space_id == space_id)
        if workspace_id is not None:
            stmt = stmt.where(SpaceRow.workspace_id == workspace_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()


class SpaceMemberRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add_user(self, *, user_id: UUID, space_id: UUID, role: str,
                       added_by_id: UUID | None = None) -> SpaceMemberRow:
        return await self._insert(space_id=space_id, role=role, added_by_id=added_by_id,
                                  user_id=user_id)

    async def add_group(self, *, group_id: UUID, space_id: UUID, role: str,
                        added_by_id: UUID | None = None) -> SpaceMemberRow:
        return await self._insert(space_id=space_id, role=role, added_by_id=added_by_id,
                                  group_id=group_id)

    async def _insert(self, *, space_id: UUID, role: str, added_by_id: UUID | None,
                      user_id: UUID | None = None,
                      group_id: UUID | None = None) -> SpaceMemberRow:
        now = utc_now()
        row = SpaceMemberRow(
            space_member_id=new_uuid7(), space_id=space_id,
            user_id=user_id, group_id=group_id, role=role,
            added_by_id=added_by_id, created_at=now, updated_at=now,
        )
        self._session.add(row)
        await self._session.flush()
        return row
