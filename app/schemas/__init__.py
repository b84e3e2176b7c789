from .workspace import (
    WorkspaceBase,
    WorkspaceCreate,
    WorkspaceRead,
)

from .menu_item import (
    MenuItemBase,
    MenuItemCreate,
    MenuItemUpdate,
    MenuItemPatch,
    MenuItemRead,
    MenuItemTreeRead,
    WorkspaceMenuItemStructure,
    MenuItemStructureNode,
    WorkspaceMenuItemStructureUpload,
)

__all__ = [
    # Workspaces
    "WorkspaceBase",
    "WorkspaceCreate",
    "WorkspaceRead",
    # Menu Items
    "MenuItemBase",
    "MenuItemCreate",
    "MenuItemUpdate",
    "MenuItemPatch",
    "MenuItemRead",
    "MenuItemTreeRead",
    "WorkspaceMenuItemStructure",
    "MenuItemStructureNode",
    "WorkspaceMenuItemStructureUpload",
]
