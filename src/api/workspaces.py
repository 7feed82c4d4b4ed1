"""FastAPI workspace endpoints.

POST  /v1/workspaces                          — provision a workspace
POST  /v1/workspaces/check-hostname           — resolve a hostname to its URL
PATCH /v1/workspaces/{ws}                     — administrative update
POST  /v1/workspaces/{ws}/members             — attach a user to the workspace
PATCH /v1/workspaces/{ws}/members/role        — change a member's workspace role

Core errors are mapped to status codes by the handler in ``src.api.main``.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import (
    get_current_user,
    get_current_user_id,
    get_hostname_service,
    get_provisioner,
    get_role_governor,
)
from src.db.session import get_async_session
from src.db.tables import UserRow
from src.models.common import UserRole
from src.models.workspace import (
    AddWorkspaceMember,
    HostnameCheck,
    UpdateMemberRole,
    UpdateWorkspace,
    Workspace,
)
from src.workspaces.domain import HostnameService
from src.workspaces.provisioning import WorkspaceProvisioner
from src.workspaces.roles import RoleGovernor, can_manage_roles

router = APIRouter(prefix="/v1/workspaces", tags=["workspaces"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------


class CreateWorkspaceRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    description: str | None = Field(default=None, max_length=250)
    hostname: str | None = Field(default=None, min_length=1, max_length=64)


class WorkspaceResponse(BaseModel):
    workspace_id: str
    name: str
    description: str | None = None
    logo: str | None = None
    hostname: str | None = None
    default_role: str
    default_space_id: str | None = None


class MemberResponse(BaseModel):
    user_id: str
    workspace_id: str | None = None
    role: str | None = None


class HostnameResponse(BaseModel):
    hostname: str


def _workspace_response(workspace: Workspace) -> WorkspaceResponse:
    return WorkspaceResponse(
        workspace_id=str(workspace.workspace_id),
        name=workspace.name,
        description=workspace.description,
        logo=workspace.logo,
        hostname=workspace.hostname,
        default_role=workspace.default_role.value,
        default_space_id=str(workspace.default_space_id) if workspace.default_space_id else None,
    )


def _member_response(user: UserRow) -> MemberResponse:
    return MemberResponse(
        user_id=str(user.user_id),
        workspace_id=str(user.workspace_id) if user.workspace_id else None,
        role=user.role,
    )


def _require_manager(actor: UserRow, workspace_id: UUID) -> None:
    if actor.workspace_id != workspace_id or not can_manage_roles(actor.role):
        raise HTTPException(status_code=403, detail="Not allowed to manage this workspace.")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("", status_code=201, response_model=WorkspaceResponse)
async def create_workspace(
    body: CreateWorkspaceRequest,
    user_id: UUID = Depends(get_current_user_id),
    provisioner: WorkspaceProvisioner = Depends(get_provisioner),
) -> WorkspaceResponse:
    """Provision a workspace owned by the caller (own transaction, retried on conflict)."""
    workspace = await provisioner.create(user_id, body.model_dump())
    return _workspace_response(workspace)


@router.post("/check-hostname", response_model=HostnameResponse)
async def check_hostname(
    body: HostnameCheck,
    hostnames: HostnameService = Depends(get_hostname_service),
    session: AsyncSession = Depends(get_async_session),
) -> HostnameResponse:
    url = await hostnames.resolve(body.hostname, session)
    return HostnameResponse(hostname=url)


@router.patch("/{workspace_id}", response_model=WorkspaceResponse)
async def update_workspace(
    workspace_id: UUID,
    body: UpdateWorkspace,
    actor: UserRow = Depends(get_current_user),
    provisioner: WorkspaceProvisioner = Depends(get_provisioner),
    session: AsyncSession = Depends(get_async_session),
) -> WorkspaceResponse:
    _require_manager(actor, workspace_id)
    workspace = await provisioner.update(workspace_id, body, session)
    return _workspace_response(workspace)


@router.post("/{workspace_id}/members", response_model=MemberResponse)
async def add_member(
    workspace_id: UUID,
    body: AddWorkspaceMember,
    actor: UserRow = Depends(get_current_user),
    provisioner: WorkspaceProvisioner = Depends(get_provisioner),
    session: AsyncSession = Depends(get_async_session),
) -> MemberResponse:
    _require_manager(actor, workspace_id)
    if body.role == UserRole.OWNER and actor.role != UserRole.OWNER:
        raise HTTPException(status_code=403, detail="Only owners can add owners.")
    user = await provisioner.add_user_to_workspace(body.user_id, workspace_id, body.role, session)
    return _member_response(user)


@router.patch("/{workspace_id}/members/role", response_model=MemberResponse)
async def update_member_role(
    workspace_id: UUID,
    body: UpdateMemberRole,
    actor: UserRow = Depends(get_current_user),
    governor: RoleGovernor = Depends(get_role_governor),
    session: AsyncSession = Depends(get_async_session),
) -> MemberResponse:
    _require_manager(actor, workspace_id)
    user = await governor.update_member_role(actor, workspace_id, body.user_id, body.role, session)
    return _member_response(user)
