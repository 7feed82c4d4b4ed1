"""Seed script — load a demo tenant into the workspace database.

Creates:
1. A demo owner user (owner@demo.example)
2. A workspace provisioned for that user (default group, "General" space,
   memberships) through the regular provisioning path
3. A second demo user attached to the workspace with its default role

Idempotent: safe to run multiple times — skips if the demo owner already
belongs to a workspace.

Usage:
    python -m scripts.seed          # against DATABASE_URL from .env
    pytest tests/scripts/test_seed.py  # against aiosqlite in-memory
"""

import asyncio
import sys

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.config.settings import get_settings
from src.db.tables import UserRow
from src.db.transaction import TransactionRunner
from src.repositories.users import UserRepository
from src.workspaces.provisioning import WorkspaceProvisioner

DEMO_OWNER_EMAIL = "owner@demo.example"
DEMO_MEMBER_EMAIL = "member@demo.example"
DEMO_WORKSPACE_NAME = "Demo Workspace"


async def seed_users(session: AsyncSession) -> tuple[UserRow, UserRow]:
    """Create the demo owner and member users (not yet in a workspace)."""
    repo = UserRepository(session)
    owner = await repo.insert(name="Demo Owner", email=DEMO_OWNER_EMAIL)
    member = await repo.insert(name="Demo Member", email=DEMO_MEMBER_EMAIL)
    return owner, member


async def seed_demo(
    session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    *,
    cloud: bool = False,
) -> dict:
    """Idempotent demo seed: users + provisioned workspace.

    Returns dict with keys: created (bool), workspace_id, owner_id.
    If the demo owner already has a workspace, returns created=False and skips.
    """
    result = await session.execute(
        select(UserRow).where(UserRow.email == DEMO_OWNER_EMAIL),
    )
    existing = result.scalars().first()
    if existing is not None and existing.workspace_id is not None:
        return {
            "created": False,
            "workspace_id": existing.workspace_id,
            "owner_id": existing.user_id,
        }

    provisioner = WorkspaceProvisioner(TransactionRunner(session_factory), cloud=cloud)

    # Joins the caller's transaction so the whole seed commits together.
    owner, member = await seed_users(session)
    workspace = await provisioner.create(
        owner.user_id,
        {"name": DEMO_WORKSPACE_NAME, "description": "Seeded demo tenant."},
        session,
    )
    await provisioner.add_user_to_workspace(member.user_id, workspace.workspace_id, session=session)

    return {
        "created": True,
        "workspace_id": workspace.workspace_id,
        "owner_id": owner.user_id,
        "member_id": member.user_id,
        "hostname": workspace.hostname,
        "default_space_id": workspace.default_space_id,
    }


# ---------------------------------------------------------------------------
# CLI entry point: python -m scripts.seed
# ---------------------------------------------------------------------------


async def _run_seed() -> None:
    """Run the seed against the real database (idempotent)."""
    from src.db.session import async_session_factory

    settings = get_settings()
    async with async_session_factory() as session:
        result = await seed_demo(session, async_session_factory, cloud=settings.CLOUD)

        if not result["created"]:
            print("Demo data already seeded. Skipping.")
            print(f"  Workspace: {result['workspace_id']}")
            return

        await session.commit()

        print("Seed complete.")
        print(f"  Workspace:     {result['workspace_id']}")
        print(f"  Hostname:      {result['hostname'] or '-'}")
        print(f"  Default space: {result['default_space_id']}")
        print(f"  Owner:         {result['owner_id']} ({DEMO_OWNER_EMAIL})")
        print(f"  Member:        {result['member_id']} ({DEMO_MEMBER_EMAIL})")


if __name__ == "__main__":
    asyncio.run(_run_seed())


def __getattr__(name: str):  # type: ignore[misc]
    """Allow `python -m scripts.seed` to work."""
    if name == "__main__":
        asyncio.run(_run_seed())
        sys.exit(0)
    raise AttributeError(name)
