from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime


# ---------- Shared display attributes ----------
class MenuItemBase(BaseModel):
    key: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    application_id: Optional[str] = None
    disabled: bool = False
    position: int = 0
    permission: Optional[str] = None
    badge: Optional[str] = None
    scope: Optional[str] = None
    external: bool = False
    i18n: Optional[Dict[str, str]] = None


class MenuItemCreate(MenuItemBase):
    key: str = Field(..., min_length=1)
    parent_item_id: Optional[str] = None


class MenuItemUpdate(BaseModel):
    # Always applied: leaving it out (or null) moves the item to the root level.
    parent_item_id: Optional[str] = None

    key: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    application_id: Optional[str] = None
    disabled: Optional[bool] = None
    position: Optional[int] = None
    permission: Optional[str] = None
    badge: Optional[str] = None
    scope: Optional[str] = None
    external: Optional[bool] = None
    i18n: Optional[Dict[str, str]] = None


class MenuItemPatch(MenuItemUpdate):
    id: str = Field(..., min_length=1)


class MenuItemRead(MenuItemBase):
    id: str
    workspace_id: str
    workspace_name: str
    parent_item_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---------- Tree views ----------
class MenuItemTreeRead(MenuItemRead):
    children: List["MenuItemTreeRead"] = []

    @classmethod
    def from_node(cls, node) -> "MenuItemTreeRead":
        """Build a nested read model from a MenuTreeNode."""
        read = cls.model_validate(node.item)
        read.children = [cls.from_node(child) for child in node.children]
        return read


class WorkspaceMenuItemStructure(BaseModel):
    menu_items: List[MenuItemTreeRead] = []


# ---------- Structure upload ----------
class MenuItemStructureNode(MenuItemBase):
    key: str = Field(..., min_length=1)
    children: List["MenuItemStructureNode"] = []


class WorkspaceMenuItemStructureUpload(BaseModel):
    menu_items: Optional[List[MenuItemStructureNode]] = None


MenuItemTreeRead.model_rebuild()
MenuItemStructureNode.model_rebuild()
