"""Transaction runner — all-or-nothing execution of a unit of work.

A caller that already holds an open transaction passes its session and the
work joins that transaction (pass-through). Otherwise the work runs inside
``session.begin()`` on the given session, or on a fresh one from the
factory: commit on success, rollback on any exception.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

T = TypeVar("T")

UnitOfWork = Callable[[AsyncSession], Awaitable[T]]


class TransactionRunner:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def run(self, fn: UnitOfWork[T], session: AsyncSession | None = None) -> T:
        if session is not None:
            if session.in_transaction():
                return await fn(session)
            async with session.begin():
                return await fn(session)
        async with self._session_factory() as new_session:
            async with new_session.begin():
                return await fn(new_session)

    @staticmethod
    def joins(session: AsyncSession | None) -> bool:
        """True when work on ``session`` would join a caller-owned transaction."""
        return session is not None and session.in_transaction()
