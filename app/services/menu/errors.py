"""
Menu tree errors

Each failure of the tree integrity rules has its own exception type so callers
can tell a cycle apart from a cross-workspace move. The HTTP layer maps
``status_code`` and ``error_code`` straight onto the problem response.
"""
from typing import Iterable


class MenuItemError(Exception):
    """Base class for menu tree integrity failures"""

    error_code = "MENU_ITEM_ERROR"
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class WorkspaceNotFound(MenuItemError):
    error_code = "WORKSPACE_DOES_NOT_EXIST"

    def __init__(self, workspace_id: str):
        super().__init__(f"Workspace {workspace_id} does not exist")
        self.workspace_id = workspace_id


class ParentNotFound(MenuItemError):
    error_code = "PARENT_MENU_DOES_NOT_EXIST"

    def __init__(self, parent_item_id: str):
        super().__init__(f"Parent menu item {parent_item_id} does not exist")
        self.parent_item_id = parent_item_id


class CrossWorkspaceParent(MenuItemError):
    error_code = "WORKSPACE_DIFFERENT"

    def __init__(self, parent_item_id: str, workspace_id: str):
        super().__init__(
            f"Parent menu item {parent_item_id} is not assigned to workspace {workspace_id}"
        )
        self.parent_item_id = parent_item_id
        self.workspace_id = workspace_id


class SelfParent(MenuItemError):
    error_code = "PARENT_ITEM_IS_SELF"

    def __init__(self, item_id: str):
        super().__init__(f"Menu item {item_id} cannot be its own parent")
        self.item_id = item_id


class CycleDetected(MenuItemError):
    error_code = "CYCLE_DEPENDENCY"

    def __init__(self, item_id: str, parent_item_id: str):
        super().__init__(
            f"Menu item {parent_item_id} is a descendant of {item_id}; "
            f"moving {item_id} under it would create a cycle"
        )
        self.item_id = item_id
        self.parent_item_id = parent_item_id


class NotFound(MenuItemError):
    error_code = "MENU_ITEM_NOT_FOUND"
    status_code = 404

    def __init__(self, item_ids: Iterable[str] = ()):
        self.missing_ids = sorted(item_ids)
        if self.missing_ids:
            detail = "Menu items do not exist: " + ", ".join(self.missing_ids)
        else:
            detail = "Menu item not found"
        super().__init__(detail)


class EmptyStructure(MenuItemError):
    error_code = "MENU_ITEMS_NULL"

    def __init__(self):
        super().__init__("menu_items cannot be null or empty")
