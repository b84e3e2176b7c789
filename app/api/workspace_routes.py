from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from app.crud import workspace as workspace_crud
from app.db import get_db
from app.schemas.workspace import WorkspaceCreate, WorkspaceRead

log = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=WorkspaceRead, status_code=201)
async def create_workspace(
    workspace: WorkspaceCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new workspace"""
    try:
        created = await workspace_crud.create_workspace(db, workspace)
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Workspace name already exists")
    log.info("workspace created: workspace=%s name=%s", created.id, created.name)
    return created


@router.get("", response_model=List[WorkspaceRead])
async def list_workspaces(db: AsyncSession = Depends(get_db)):
    return await workspace_crud.get_workspaces(db)


@router.get("/{workspace_id}", response_model=WorkspaceRead)
async def get_workspace(workspace_id: str, db: AsyncSession = Depends(get_db)):
    workspace = await workspace_crud.find_by_id(db, workspace_id)
    if not workspace:
        raise HTTPException(status_code=404, detail="Workspace not found")
    return workspace
