"""Tests for hostname lookup and URL resolution."""

import pytest

from src.config.settings import Settings
from src.repositories.workspace import WorkspaceRepository
from src.workspaces.domain import DomainService, HostnameService
from src.workspaces.errors import NotFoundError


class TestDomainService:

    def test_single_tenant_uses_app_url(self, settings) -> None:
        assert DomainService(settings).get_url("acme") == "http://localhost:3000"

    def test_cloud_builds_subdomain(self, cloud_settings) -> None:
        assert DomainService(cloud_settings).get_url("acme") == "https://acme.example.com"

    def test_cloud_without_hostname(self, cloud_settings) -> None:
        assert DomainService(cloud_settings).get_url() == "https://app.example.com"

    def test_cloud_without_subdomain_host(self) -> None:
        settings = Settings(CLOUD=True, APP_URL="https://app.example.com/", SUBDOMAIN_HOST="")
        assert DomainService(settings).get_url("acme") == "https://app.example.com"


class TestHostnameService:

    @pytest.fixture
    async def registered(self, session_factory) -> None:
        async with session_factory() as session, session.begin():
            await WorkspaceRepository(session).insert(name="Acme", hostname="acme", description=None)

    @pytest.mark.anyio
    async def test_exists(self, transactions, cloud_settings, registered) -> None:
        service = HostnameService(transactions, DomainService(cloud_settings))
        assert await service.exists("acme") is True
        assert await service.exists("ACME") is True
        assert await service.exists("globex") is False

    @pytest.mark.anyio
    async def test_resolve(self, transactions, cloud_settings, registered) -> None:
        service = HostnameService(transactions, DomainService(cloud_settings))
        assert await service.resolve("acme") == "https://acme.example.com"

    @pytest.mark.anyio
    async def test_resolve_unknown(self, transactions, cloud_settings) -> None:
        service = HostnameService(transactions, DomainService(cloud_settings))
        with pytest.raises(NotFoundError, match="Hostname not found"):
            await service.resolve("globex")
