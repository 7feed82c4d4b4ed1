"""FastAPI dependency injection factories for the workspace core.

Repository-backed services take the session factory via
Depends(get_session_factory) and the request session via
Depends(get_async_session). API endpoints use these via Depends().
"""

from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.config.settings import Settings, get_settings
from src.db.session import async_session_factory, get_async_session
from src.db.tables import UserRow
from src.db.transaction import TransactionRunner
from src.repositories.users import UserRepository
from src.workspaces.domain import DomainService, HostnameService
from src.workspaces.provisioning import WorkspaceProvisioner
from src.workspaces.roles import RoleGovernor

# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_factory


def get_transaction_runner(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> TransactionRunner:
    return TransactionRunner(session_factory)


# ---------------------------------------------------------------------------
# Acting user
# ---------------------------------------------------------------------------


def get_current_user_id(x_user_id: UUID = Header(...)) -> UUID:
    """Identity of the caller, established by the enclosing gateway."""
    return x_user_id


async def get_current_user(
    user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_async_session),
) -> UserRow:
    user = await UserRepository(session).find_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user.")
    return user


# ---------------------------------------------------------------------------
# Workspace core
# ---------------------------------------------------------------------------


def get_provisioner(
    transactions: TransactionRunner = Depends(get_transaction_runner),
    settings: Settings = Depends(get_settings),
) -> WorkspaceProvisioner:
    return WorkspaceProvisioner.from_settings(transactions, settings)


def get_role_governor(
    transactions: TransactionRunner = Depends(get_transaction_runner),
    settings: Settings = Depends(get_settings),
) -> RoleGovernor:
    return RoleGovernor(transactions, lock_workspace=settings.ROLE_UPDATE_LOCKING)


def get_hostname_service(
    transactions: TransactionRunner = Depends(get_transaction_runner),
    settings: Settings = Depends(get_settings),
) -> HostnameService:
    return HostnameService(transactions, DomainService(settings))
