from .errors import (
    MenuItemError,
    WorkspaceNotFound,
    ParentNotFound,
    CrossWorkspaceParent,
    SelfParent,
    CycleDetected,
    NotFound,
    EmptyStructure,
)
from .tree_validator import MenuTreeIndex, check_acyclic, resolve_parent, validate_reparent
from .tree_projection import MenuTreeNode, flatten, to_forest, iter_forest
from .tree_service import MenuTreeService

__all__ = [
    # Errors
    "MenuItemError",
    "WorkspaceNotFound",
    "ParentNotFound",
    "CrossWorkspaceParent",
    "SelfParent",
    "CycleDetected",
    "NotFound",
    "EmptyStructure",
    # Validation
    "MenuTreeIndex",
    "validate_reparent",
    "resolve_parent",
    "check_acyclic",
    # Projection
    "MenuTreeNode",
    "flatten",
    "to_forest",
    "iter_forest",
    # Mutations
    "MenuTreeService",
]
