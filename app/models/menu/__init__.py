from .menu_item import MenuItem

__all__ = ["MenuItem"]
