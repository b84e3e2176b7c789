"""Flat and nested views over a loaded set of menu items."""
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List


@dataclass
class MenuTreeNode:
    item: object
    children: List["MenuTreeNode"] = field(default_factory=list)


def _position(node: MenuTreeNode) -> int:
    return getattr(node.item, "position", None) or 0


def flatten(items: Iterable) -> list:
    """Items in the order the store returned them."""
    return list(items)


def to_forest(items: Iterable) -> List[MenuTreeNode]:
    """Nest items under their parents and return the roots.

    An item is a root when it has no parent or when its parent is not part of
    ``items`` (a deleted parent, or a filtered query). Items caught in a stored
    parent loop are promoted too, so every item appears exactly once.
    Siblings are ordered by ``position``; ties keep input order.
    """
    nodes = {}
    for item in items:
        nodes[item.id] = MenuTreeNode(item)

    roots = []
    for node in nodes.values():
        parent = nodes.get(node.item.parent_item_id)
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.children.append(node)

    # Stored parent links that loop back on themselves never reach a root.
    # One member of each such loop is cut from its parent and promoted.
    reachable = _reachable(roots)
    for node in nodes.values():
        if id(node) in reachable:
            continue
        on_loop = _loop_member(node, nodes)
        parent = nodes[on_loop.item.parent_item_id]
        parent.children = [child for child in parent.children if child is not on_loop]
        roots.append(on_loop)
        reachable |= _reachable([on_loop])

    roots.sort(key=_position)
    for node in nodes.values():
        node.children.sort(key=_position)
    return roots


def _reachable(roots: Iterable[MenuTreeNode]) -> set:
    found = set()
    stack = list(roots)
    while stack:
        node = stack.pop()
        if id(node) in found:
            continue
        found.add(id(node))
        stack.extend(node.children)
    return found


def _loop_member(node: MenuTreeNode, nodes: dict) -> MenuTreeNode:
    """Follow parent links from ``node`` until one repeats."""
    seen = set()
    while node.item.id not in seen:
        seen.add(node.item.id)
        node = nodes[node.item.parent_item_id]
    return node


def iter_forest(roots: Iterable[MenuTreeNode]) -> Iterator:
    """Depth-first, pre-order walk yielding the items of a forest."""
    stack = list(reversed(list(roots)))
    seen = set()
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield node.item
        stack.extend(reversed(node.children))
