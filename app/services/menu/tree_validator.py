"""
Menu Tree Validation

Checks that moving a menu item under a new parent keeps its workspace tree
well formed: same workspace, no self parenting, no cycles.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from app.services.menu.errors import (
    CrossWorkspaceParent,
    CycleDetected,
    ParentNotFound,
    SelfParent,
)


class MenuTreeIndex:
    """In-memory view of a set of menu items.

    Holds items by id plus a parent id -> child ids index. Parent pointers are
    tracked here rather than read from the items, so a batch can record
    accepted moves with ``move`` without touching the ORM objects.
    """

    def __init__(self, items: Iterable = ()):
        self._items: Dict[str, object] = {}
        self._parents: Dict[str, Optional[str]] = {}
        self._children: Dict[str, List[str]] = defaultdict(list)
        for item in items:
            self.add(item)

    def __contains__(self, item_id) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def add(self, item):
        if item.id in self._items:
            return
        self._items[item.id] = item
        self._parents[item.id] = item.parent_item_id
        if item.parent_item_id is not None:
            self._children[item.parent_item_id].append(item.id)

    def get(self, item_id: str):
        return self._items.get(item_id)

    def parent_of(self, item_id: str) -> Optional[str]:
        return self._parents.get(item_id)

    def children_of(self, item_id: str) -> List[str]:
        return list(self._children.get(item_id, ()))

    def move(self, item_id: str, parent_item_id: Optional[str]):
        old_parent = self._parents.get(item_id)
        if old_parent == parent_item_id:
            return
        if old_parent is not None:
            self._children[old_parent].remove(item_id)
        self._parents[item_id] = parent_item_id
        if parent_item_id is not None:
            self._children[parent_item_id].append(item_id)

    def descendants(self, item_id: str) -> Set[str]:
        """All ids reachable through children of ``item_id``.

        Iterative with a visited set, so a cycle already present in stored
        data cannot loop forever.
        """
        found: Set[str] = set()
        stack = [item_id]
        while stack:
            current = stack.pop()
            for child_id in self._children.get(current, ()):
                if child_id in found:
                    continue
                found.add(child_id)
                stack.append(child_id)
        return found


def _current_parent_id(item, index: MenuTreeIndex) -> Optional[str]:
    return index.parent_of(item.id) if item.id in index else item.parent_item_id


def resolve_parent(item, proposed_parent_id: Optional[str], index: MenuTreeIndex):
    """Existence and membership checks for a move, without the cycle check.

    Returns the resolved parent item, or None when the item becomes (or stays)
    a root or keeps its current parent.
    """
    if proposed_parent_id is None:
        return None

    current_parent_id = _current_parent_id(item, index)
    if proposed_parent_id == current_parent_id:
        return index.get(current_parent_id)

    if proposed_parent_id == item.id:
        raise SelfParent(item.id)

    parent = index.get(proposed_parent_id)
    if parent is None:
        raise ParentNotFound(proposed_parent_id)

    if parent.workspace_id != item.workspace_id:
        raise CrossWorkspaceParent(parent.id, item.workspace_id)

    return parent


def check_acyclic(item_id: str, index: MenuTreeIndex):
    """Raise CycleDetected when the parent recorded in ``index`` for ``item_id``
    is one of its own descendants."""
    parent_item_id = index.parent_of(item_id)
    if parent_item_id is not None and parent_item_id in index.descendants(item_id):
        raise CycleDetected(item_id, parent_item_id)


def validate_reparent(item, proposed_parent_id: Optional[str], index: MenuTreeIndex):
    """Check that ``item`` may be placed under ``proposed_parent_id``.

    Returns the resolved parent item, or None when the item becomes (or stays)
    a root or keeps its current parent. Raises a MenuItemError subclass on the
    first rule that fails. Nothing is modified.
    """
    unchanged = proposed_parent_id == _current_parent_id(item, index)
    parent = resolve_parent(item, proposed_parent_id, index)

    if parent is not None and not unchanged and parent.id in index.descendants(item.id):
        raise CycleDetected(item.id, parent.id)

    return parent
