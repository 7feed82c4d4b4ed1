"""User repository — workspace attachment and workspace role."""

from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.tables import UserRow
from src.models.common import new_uuid7, utc_now


class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(self, *, name: str, email: str,
                     workspace_id: UUID | None = None,
                     role: str | None = None,
                     user_id: UUID | None = None) -> UserRow:
        now = utc_now()
        row = UserRow(
            user_id=user_id or new_uuid7(), name=name, email=email.lower(),
            workspace_id=workspace_id, role=role,
            created_at=now, updated_at=now,
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def find_by_id(self, user_id: UUID,
                         workspace_id: UUID | None = None) -> UserRow | None:
        stmt = select(UserRow).where(UserRow.user_id == user_id)
        if workspace_id is not None:
            stmt = stmt.where(UserRow.workspace_id == workspace_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_by_id(self, user_id: UUID, values: dict[str, Any],
                           workspace_id: UUID | None = None) -> UserRow | None:
        row = await self.find_by_id(user_id, workspace_id)
        if row is not None:
            for key, value in values.items():
                setattr(row, key, value)
            row.updated_at = utc_now()
            await self._session.flush()
        return row

    async def count_by_role_in_workspace(self, role: str, workspace_id: UUID) -> int:
        result = await self._session.execute(
            select(func.count())
            .select_from(UserRow)
            .where(UserRow.workspace_id == workspace_id, UserRow.role == role)
        )
        return int(result.scalar_one())
