from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.db import get_db
from app.schemas.menu_item import (
    MenuItemCreate,
    MenuItemUpdate,
    MenuItemPatch,
    MenuItemRead,
    MenuItemTreeRead,
    WorkspaceMenuItemStructure,
    WorkspaceMenuItemStructureUpload,
)
from app.services.menu import MenuTreeService

router = APIRouter()


def get_menu_tree_service(db: AsyncSession = Depends(get_db)) -> MenuTreeService:
    return MenuTreeService(db)


# ----- Create Menu Item
@router.post("", response_model=MenuItemRead, status_code=201)
async def create_menu_item_for_workspace(
    workspace_id: str,
    payload: MenuItemCreate,
    request: Request,
    response: Response,
    service: MenuTreeService = Depends(get_menu_tree_service),
):
    item = await service.create_item(workspace_id, payload)
    response.headers["Location"] = str(
        request.url_for("get_menu_item_by_id", workspace_id=workspace_id, menu_item_id=item.id)
    )
    return item


# ----- List Menu Items (flat)
@router.get("", response_model=List[MenuItemRead])
async def get_menu_items_for_workspace(
    workspace_id: str,
    service: MenuTreeService = Depends(get_menu_tree_service),
):
    return await service.list_items(workspace_id)


# ----- Menu Structure (nested)
@router.get("/tree", response_model=WorkspaceMenuItemStructure)
async def get_menu_structure_for_workspace(
    workspace_id: str,
    service: MenuTreeService = Depends(get_menu_tree_service),
):
    roots = await service.get_tree(workspace_id)
    return WorkspaceMenuItemStructure(
        menu_items=[MenuItemTreeRead.from_node(node) for node in roots]
    )


# ----- Replace Menu Structure
@router.post("/tree/upload", status_code=204)
async def upload_menu_structure_for_workspace(
    workspace_id: str,
    structure: WorkspaceMenuItemStructureUpload,
    service: MenuTreeService = Depends(get_menu_tree_service),
):
    await service.replace_structure(workspace_id, structure)
    return Response(status_code=204)


# ----- Patch Many
@router.patch("", response_model=List[MenuItemRead])
async def patch_menu_items(
    workspace_id: str,
    payloads: List[MenuItemPatch],
    service: MenuTreeService = Depends(get_menu_tree_service),
):
    return await service.patch_items(payloads)


# ----- Delete All
@router.delete("", status_code=204)
async def delete_all_menu_items_for_workspace(
    workspace_id: str,
    service: MenuTreeService = Depends(get_menu_tree_service),
):
    await service.delete_all_for_workspace(workspace_id)
    return Response(status_code=204)


# ----- Get One
@router.get("/{menu_item_id}", response_model=MenuItemRead)
async def get_menu_item_by_id(
    workspace_id: str,
    menu_item_id: str,
    service: MenuTreeService = Depends(get_menu_tree_service),
):
    return await service.get_item(menu_item_id)


# ----- Update One
@router.put("/{menu_item_id}", response_model=MenuItemRead)
async def update_menu_item(
    workspace_id: str,
    menu_item_id: str,
    payload: MenuItemUpdate,
    service: MenuTreeService = Depends(get_menu_tree_service),
):
    return await service.update_item(menu_item_id, payload)


# ----- Delete One
@router.delete("/{menu_item_id}", status_code=204)
async def delete_menu_item_by_id(
    workspace_id: str,
    menu_item_id: str,
    service: MenuTreeService = Depends(get_menu_tree_service),
):
    await service.delete_item(menu_item_id)
    return Response(status_code=204)
