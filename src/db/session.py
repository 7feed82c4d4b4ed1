"""Async engine and sessions for the workspace store.

``Base`` is the declarative base the workspace tables register on. Request
handlers get a session from ``get_async_session``; the workspace core opens
its own through ``async_session_factory`` via ``TransactionRunner``.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from src.config.settings import get_settings


class Base(DeclarativeBase):
    """Declarative base for workspaces, users, groups and spaces."""


_settings = get_settings()

engine = create_async_engine(
    _settings.DATABASE_URL,
    echo=(_settings.ENVIRONMENT == "dev"),
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session shared by the dependencies of one request.

    Work the core runs on it joins this transaction, which commits once the
    handler returns and rolls back if it raises.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
