from . import workspace
from . import menu_item

__all__ = [
    "workspace",
    "menu_item",
]
