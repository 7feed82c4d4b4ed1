"""Workspace repository."""

from typing import Any
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.tables import WorkspaceRow
from src.models.common import new_uuid7, utc_now


class WorkspaceRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(self, *, name: str, hostname: str | None,
                     description: str | None,
                     workspace_id: UUID | None = None) -> WorkspaceRow:
        now = utc_now()
        row = WorkspaceRow(
            workspace_id=workspace_id or new_uuid7(), name=name,
            hostname=hostname, description=description,
            default_role="member", created_at=now, updated_at=now,
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def update_by_id(self, workspace_id: UUID,
                           values: dict[str, Any]) -> WorkspaceRow | None:
        row = await self.find_by_id(workspace_id)
        if row is not None:
            for key, value in values.items():
                setattr(row, key, value)
            row.updated_at = utc_now()
            await self._session.flush()
        return row

    async def find_by_id(self, workspace_id: UUID) -> WorkspaceRow | None:
        return await self._session.get(WorkspaceRow, workspace_id)

    async def find_by_id_for_update(self, workspace_id: UUID) -> WorkspaceRow | None:
        """Load the workspace under a row lock (no-op on SQLite)."""
        result = await self._session.execute(
            select(WorkspaceRow)
            .where(WorkspaceRow.workspace_id == workspace_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def hostname_exists(self, hostname: str) -> bool:
        if not hostname:
            return False
        result = await self._session.execute(
            select(exists().where(WorkspaceRow.hostname == hostname.lower()))
        )
        return bool(result.scalar())
