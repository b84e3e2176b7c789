from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.workspace import Workspace
from app.schemas.workspace import WorkspaceCreate


async def create_workspace(db: AsyncSession, workspace: WorkspaceCreate):
    """Create a new workspace"""
    new_workspace = Workspace(
        name=workspace.name,
        description=workspace.description,
    )
    db.add(new_workspace)
    await db.commit()
    await db.refresh(new_workspace)
    return new_workspace


async def get_workspaces(db: AsyncSession):
    result = await db.execute(select(Workspace).order_by(Workspace.name))
    return result.scalars().all()


async def find_by_id(db: AsyncSession, workspace_id: str):
    result = await db.execute(select(Workspace).where(Workspace.id == workspace_id))
    return result.scalar_one_or_none()


async def lock(db: AsyncSession, workspace_id: str):
    """Load a workspace row with FOR UPDATE, serializing tree writes per workspace.

    Dialects without row locks (SQLite) ignore the clause.
    """
    result = await db.execute(
        select(Workspace).where(Workspace.id == workspace_id).with_for_update()
    )
    return result.scalar_one_or_none()
