"""Shared pytest fixtures for the workspace test suite.

Provides:
- db_engine: in-memory SQLite async engine with all tables
- db_session: SAVEPOINT-isolated async session (app commits don't leak)
- session_factory / transactions: for code that opens its own transactions
- make_user: commit a user row and return it
- client: AsyncClient with dependency overrides for DB-backed testing
"""

from collections.abc import Awaitable, Callable
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.config.settings import Settings
from src.db.session import Base, get_async_session
from src.db.tables import UserRow
from src.db.transaction import TransactionRunner
from src.repositories.users import UserRepository
import src.db.tables  # noqa: F401 — register ORM models on Base.metadata

MakeUser = Callable[..., Awaitable[UserRow]]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with all tables."""
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Provide a SAVEPOINT-isolated session.

    The outer transaction is never committed — it rolls back at teardown.
    Application code calling session.commit() triggers a SAVEPOINT release,
    which is then restarted so subsequent operations stay in the same
    outer transaction. This ensures full test isolation.
    """
    async with db_engine.connect() as conn:
        trans = await conn.begin()
        session = AsyncSession(bind=conn, expire_on_commit=False)

        # Start a nested SAVEPOINT
        nested = await conn.begin_nested()

        @event.listens_for(session.sync_session, "after_transaction_end")
        def restart_savepoint(sync_session, transaction):  # noqa: ARG001
            nonlocal nested
            if transaction.nested and not transaction._parent.nested:
                nested = conn.sync_connection.begin_nested()

        yield session

        await session.close()
        await trans.rollback()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Session maker bound to the test engine; each session commits for real."""
    return async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def transactions(session_factory) -> TransactionRunner:
    return TransactionRunner(session_factory)


@pytest.fixture
def make_user(session_factory) -> MakeUser:
    """Commit a user and return the row.

    Usage: ``alice = await make_user("Alice", workspace_id=ws, role="owner")``
    """

    async def _make(
        name: str,
        *,
        email: str | None = None,
        workspace_id: UUID | None = None,
        role: str | None = None,
    ) -> UserRow:
        async with session_factory() as session, session.begin():
            return await UserRepository(session).insert(
                name=name,
                email=email or f"{name.lower().replace(' ', '.')}@example.com",
                workspace_id=workspace_id,
                role=role,
            )

    return _make


@pytest.fixture
def settings() -> Settings:
    return Settings(CLOUD=False, APP_URL="http://localhost:3000")


@pytest.fixture
def cloud_settings() -> Settings:
    return Settings(
        CLOUD=True,
        APP_URL="https://app.example.com",
        SUBDOMAIN_HOST="example.com",
    )


@pytest.fixture
async def client(session_factory, settings):
    """AsyncClient with sessions, session factory and settings overridden."""
    from src.api.dependencies import get_session_factory
    from src.api.main import app
    from src.config.settings import get_settings

    async def _override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = _override_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_settings] = lambda: settings

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
