"""Tests for the FastAPI surface: infrastructure endpoints and workspace routes."""

from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient

from src.api.main import app, status_for
from src.config.settings import get_settings
from src.workspaces.errors import (
    AllocationExhaustedError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)


def _as(user) -> dict[str, str]:
    return {"x-user-id": str(user.user_id)}


@pytest.fixture
async def owned(client: AsyncClient, make_user):
    """Alice owns a workspace; Bob is an admin and Carol a member."""
    alice = await make_user("Alice")
    response = await client.post("/v1/workspaces", json={"name": "Acme"}, headers=_as(alice))
    assert response.status_code == 201
    workspace_id = response.json()["workspace_id"]
    bob = await make_user("Bob", workspace_id=UUID(workspace_id), role="admin")
    carol = await make_user("Carol", workspace_id=UUID(workspace_id), role="member")
    return workspace_id, alice, bob, carol


class TestHealthEndpoint:
    """GET /health reports component status."""

    @pytest.mark.anyio
    async def test_health_returns_200(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.status_code == 200

    @pytest.mark.anyio
    async def test_health_response_body(self, client: AsyncClient) -> None:
        data = (await client.get("/health")).json()
        assert data["status"] in ("ok", "degraded")
        assert data["checks"]["api"] is True
        assert "environment" in data


class TestVersionEndpoint:

    @pytest.mark.anyio
    async def test_version_response_body(self, client: AsyncClient) -> None:
        response = await client.get("/api/version")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Workspaces"
        assert "version" in data


class TestErrorMapping:

    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (NotFoundError("x"), 404),
            (ValidationFailedError("x"), 400),
            (PermissionDeniedError("x"), 403),
            (ConflictError("x"), 409),
            (AllocationExhaustedError("x"), 409),
        ],
    )
    def test_status_for(self, error, status) -> None:
        assert status_for(error) == status


class TestCreateWorkspace:

    @pytest.mark.anyio
    async def test_create(self, client: AsyncClient, make_user) -> None:
        alice = await make_user("Alice")
        response = await client.post(
            "/v1/workspaces",
            json={"name": "Acme", "description": "Docs"},
            headers=_as(alice),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Acme"
        assert data["default_role"] == "member"
        assert data["default_space_id"] is not None
        assert data["hostname"] is None

    @pytest.mark.anyio
    async def test_missing_identity_header(self, client: AsyncClient) -> None:
        response = await client.post("/v1/workspaces", json={"name": "Acme"})
        assert response.status_code == 422

    @pytest.mark.anyio
    async def test_unknown_user(self, client: AsyncClient) -> None:
        response = await client.post(
            "/v1/workspaces", json={"name": "Acme"}, headers={"x-user-id": str(uuid4())},
        )
        assert response.status_code == 404

    @pytest.mark.anyio
    async def test_name_too_long(self, client: AsyncClient, make_user) -> None:
        alice = await make_user("Alice")
        response = await client.post("/v1/workspaces", json={"name": "a" * 65}, headers=_as(alice))
        assert response.status_code == 422

    @pytest.mark.anyio
    async def test_cloud_assigns_hostname(self, client: AsyncClient, make_user, cloud_settings) -> None:
        app.dependency_overrides[get_settings] = lambda: cloud_settings
        alice = await make_user("Alice")
        response = await client.post("/v1/workspaces", json={"name": "Acme Corp"}, headers=_as(alice))
        assert response.status_code == 201
        assert response.json()["hostname"] == "acmecorp"


class TestUpdateWorkspace:

    @pytest.mark.anyio
    async def test_owner_renames(self, client: AsyncClient, owned) -> None:
        workspace_id, alice, _, _ = owned
        response = await client.patch(
            f"/v1/workspaces/{workspace_id}", json={"name": "Acme Labs"}, headers=_as(alice),
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Acme Labs"

    @pytest.mark.anyio
    async def test_member_forbidden(self, client: AsyncClient, owned) -> None:
        workspace_id, _, _, carol = owned
        response = await client.patch(
            f"/v1/workspaces/{workspace_id}", json={"name": "Mine"}, headers=_as(carol),
        )
        assert response.status_code == 403

    @pytest.mark.anyio
    async def test_foreign_default_space(self, client: AsyncClient, owned) -> None:
        workspace_id, alice, _, _ = owned
        response = await client.patch(
            f"/v1/workspaces/{workspace_id}",
            json={"default_space_id": str(uuid4())},
            headers=_as(alice),
        )
        assert response.status_code == 400


class TestMembers:

    @pytest.mark.anyio
    async def test_add_member_with_default_role(self, client: AsyncClient, owned, make_user) -> None:
        workspace_id, alice, _, _ = owned
        dave = await make_user("Dave")
        response = await client.post(
            f"/v1/workspaces/{workspace_id}/members",
            json={"user_id": str(dave.user_id)},
            headers=_as(alice),
        )
        assert response.status_code == 200
        assert response.json()["role"] == "member"
        assert response.json()["workspace_id"] == workspace_id

    @pytest.mark.anyio
    async def test_admin_cannot_add_owner(self, client: AsyncClient, owned, make_user) -> None:
        workspace_id, _, bob, _ = owned
        dave = await make_user("Dave")
        response = await client.post(
            f"/v1/workspaces/{workspace_id}/members",
            json={"user_id": str(dave.user_id), "role": "owner"},
            headers=_as(bob),
        )
        assert response.status_code == 403

    @pytest.mark.anyio
    async def test_cannot_take_another_workspaces_owner(self, client: AsyncClient, owned, make_user) -> None:
        workspace_id, alice, _, _ = owned
        erin = await make_user("Erin")
        other = await client.post("/v1/workspaces", json={"name": "Globex"}, headers=_as(erin))
        assert other.status_code == 201

        response = await client.post(
            f"/v1/workspaces/{workspace_id}/members",
            json={"user_id": str(erin.user_id)},
            headers=_as(alice),
        )
        assert response.status_code == 400
        assert "already belongs" in response.json()["detail"]

        # Erin still owns Globex, so she can still manage it.
        rename = await client.patch(
            f"/v1/workspaces/{other.json()['workspace_id']}",
            json={"name": "Globex Labs"},
            headers=_as(erin),
        )
        assert rename.status_code == 200


class TestMemberRole:

    @pytest.mark.anyio
    async def test_admin_promotes_member(self, client: AsyncClient, owned) -> None:
        workspace_id, _, bob, carol = owned
        response = await client.patch(
            f"/v1/workspaces/{workspace_id}/members/role",
            json={"user_id": str(carol.user_id), "role": "ADMIN"},
            headers=_as(bob),
        )
        assert response.status_code == 200
        assert response.json()["role"] == "admin"

    @pytest.mark.anyio
    async def test_admin_cannot_touch_owner(self, client: AsyncClient, owned) -> None:
        workspace_id, alice, bob, _ = owned
        response = await client.patch(
            f"/v1/workspaces/{workspace_id}/members/role",
            json={"user_id": str(alice.user_id), "role": "member"},
            headers=_as(bob),
        )
        assert response.status_code == 403

    @pytest.mark.anyio
    async def test_sole_owner_kept(self, client: AsyncClient, owned) -> None:
        workspace_id, alice, _, _ = owned
        response = await client.patch(
            f"/v1/workspaces/{workspace_id}/members/role",
            json={"user_id": str(alice.user_id), "role": "admin"},
            headers=_as(alice),
        )
        assert response.status_code == 400
        assert "at least one owner" in response.json()["detail"]

    @pytest.mark.anyio
    async def test_unknown_target(self, client: AsyncClient, owned) -> None:
        workspace_id, alice, _, _ = owned
        response = await client.patch(
            f"/v1/workspaces/{workspace_id}/members/role",
            json={"user_id": str(uuid4()), "role": "admin"},
            headers=_as(alice),
        )
        assert response.status_code == 404

    @pytest.mark.anyio
    async def test_member_cannot_manage(self, client: AsyncClient, owned) -> None:
        workspace_id, _, bob, carol = owned
        response = await client.patch(
            f"/v1/workspaces/{workspace_id}/members/role",
            json={"user_id": str(bob.user_id), "role": "member"},
            headers=_as(carol),
        )
        assert response.status_code == 403


class TestCheckHostname:

    @pytest.mark.anyio
    async def test_unknown_hostname(self, client: AsyncClient) -> None:
        response = await client.post("/v1/workspaces/check-hostname", json={"hostname": "nope"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Hostname not found."

    @pytest.mark.anyio
    async def test_resolves_cloud_url(self, client: AsyncClient, make_user, cloud_settings) -> None:
        app.dependency_overrides[get_settings] = lambda: cloud_settings
        alice = await make_user("Alice")
        created = await client.post("/v1/workspaces", json={"name": "Acme"}, headers=_as(alice))
        assert created.json()["hostname"] == "acme"

        response = await client.post("/v1/workspaces/check-hostname", json={"hostname": "acme"})
        assert response.status_code == 200
        assert response.json()["hostname"] == "https://acme.example.com"
