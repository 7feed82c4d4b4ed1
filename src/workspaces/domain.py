"""Hostname lookup and workspace URL resolution."""

from urllib.parse import urlsplit

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import Settings
from src.db.transaction import TransactionRunner
from src.repositories.base import RepositoryFactory, WorkspaceRepositories
from src.workspaces.errors import NotFoundError


class DomainService:
    """Build the external URL a workspace is served under."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def get_url(self, hostname: str | None = None) -> str:
        """``{scheme}://{hostname}.{SUBDOMAIN_HOST}`` in cloud mode, else ``APP_URL``."""
        app_url = self._settings.APP_URL.rstrip("/")
        domain = self._settings.SUBDOMAIN_HOST.strip(".")
        if not self._settings.CLOUD or not hostname or not domain:
            return app_url
        scheme = urlsplit(app_url).scheme or "https"
        return f"{scheme}://{hostname}.{domain}"


class HostnameService:
    def __init__(
        self,
        transactions: TransactionRunner,
        domain: DomainService,
        *,
        repositories: RepositoryFactory = WorkspaceRepositories.for_session,
    ) -> None:
        self._transactions = transactions
        self._domain = domain
        self._repositories = repositories

    async def exists(self, hostname: str, session: AsyncSession | None = None) -> bool:
        async def unit(s: AsyncSession) -> bool:
            return await self._repositories(s).workspaces.hostname_exists(hostname)

        return await self._transactions.run(unit, session)

    async def resolve(self, hostname: str, session: AsyncSession | None = None) -> str:
        """Return the external URL for a registered hostname.

        Raises:
            NotFoundError: No workspace holds ``hostname``.
        """
        if not await self.exists(hostname, session):
            raise NotFoundError("Hostname not found.")
        return self._domain.get_url(hostname.lower())
