from .base import Base
from .workspace import Workspace
from .menu.menu_item import MenuItem

__all__ = [
    "Base",
    "Workspace",
    "MenuItem",
]
