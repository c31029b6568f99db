"""
Tree operations for tuimark.

Pure functions over an immutable element tree. Every edit returns a new root
and rebuilds only the path from the root to the changed node; siblings off
that path are shared with the input tree.

Failure policy: a target id that is not in the tree is a no-op, never an
exception. UI batch edits race against selection state, so callers compare
results when they need to know whether anything happened.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import fields, replace
from typing import Any, Literal

from .dom import CREATION_DEFAULTS, Node, label_for, node_class

logger = logging.getLogger(__name__)

ID_PATTERN = re.compile(r"^el-(\d+)$")

Direction = Literal["up", "down"]


class IdAllocator:
    """
    Hands out "el-<n>" ids from a counter.

    One allocator belongs to whoever owns the live tree. After loading a tree
    from outside, call sync() so new ids never collide with loaded ones.
    """

    def __init__(self, counter: int = 0):
        self.counter = counter

    def next_id(self) -> str:
        self.counter += 1
        return f"el-{self.counter}"

    def sync(self, root: Node) -> None:
        self.counter = sync_id_counter(root)

    def reset(self) -> None:
        self.counter = 0


def sync_id_counter(root: Node) -> int:
    """Highest n among "el-<n>" ids in the tree (0 if none). Does not mutate anything."""
    highest = 0
    for node in root.depth_first():
        match = ID_PATTERN.match(node.id)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest


def create_node(kind: str, ids: IdAllocator, **overrides: Any) -> Node:
    """New element of `kind` with the editor's creation defaults and its label as name."""
    cls = node_class(kind)
    if cls is None:
        raise ValueError(f"Unknown element type: {kind}")
    values = {"name": label_for(kind), **CREATION_DEFAULTS.get(kind, {}), **overrides}
    return cls(id=ids.next_id(), **values)


def find_node(root: Node, node_id: str) -> Node | None:
    """Depth-first search by id."""
    for node in root.depth_first():
        if node.id == node_id:
            return node
    return None


def find_parent(root: Node, node_id: str) -> Node | None:
    """First node that has a direct child with the given id."""
    for node in root.depth_first():
        if any(child.id == node_id for child in node.children):
            return node
    return None


def _contains(node: Node, node_id: str) -> bool:
    return any(n.id == node_id for n in node.depth_first())


def _rebuild(root: Node, node_id: str, change) -> Node:
    """Apply `change` to the node with node_id, rebuilding only its ancestors."""
    if root.id == node_id:
        return change(root)
    if not _contains(root, node_id):
        return root
    return replace(root, children=tuple(_rebuild(c, node_id, change) for c in root.children))


def update_node(root: Node, node_id: str, patch: Mapping[str, Any]) -> Node:
    """
    Shallow-merge `patch` into the node with node_id.

    Keys that are not fields of the target's kind are dropped (a patch can
    never change id or kind). Children given as a list are stored as a tuple.
    """
    def apply(node: Node) -> Node:
        allowed = {f.name for f in fields(node)} - {"id"}
        values = {}
        for key, value in patch.items():
            if key not in allowed:
                logger.debug("update_node: ignoring %r for %s %s", key, node.kind, node.id)
                continue
            values[key] = tuple(value) if isinstance(value, list) else value
        return replace(node, **values) if values else node

    return _rebuild(root, node_id, apply)


def add_child(root: Node, parent_id: str, new_node: Node) -> Node:
    """Append new_node to the parent's children. Unchanged if the parent is absent."""
    return _rebuild(root, parent_id, lambda p: replace(p, children=(*p.children, new_node)))


def replace_children(root: Node, parent_id: str, nodes: Iterable[Node]) -> Node:
    """Swap in a whole new children list for the parent (live code editing)."""
    new_children = tuple(nodes)
    return _rebuild(root, parent_id, lambda p: replace(p, children=new_children))


def remove_node(root: Node, node_id: str) -> Node:
    """Drop the node with node_id from whichever children list holds it."""
    if not any(_contains(c, node_id) for c in root.children):
        return root
    kept = tuple(remove_node(c, node_id) for c in root.children if c.id != node_id)
    return replace(root, children=kept)


def move_node(root: Node, node_id: str, direction: Direction) -> Node | None:
    """
    Swap a node with its previous ("up") or next ("down") sibling.

    Returns None when the move is impossible: node not found, node is the
    root, or it is already first/last among its siblings.
    """
    parent = find_parent(root, node_id)
    if parent is None:
        return None

    siblings = list(parent.children)
    idx = next(i for i, c in enumerate(siblings) if c.id == node_id)
    new_idx = idx - 1 if direction == "up" else idx + 1
    if new_idx < 0 or new_idx >= len(siblings):
        return None

    siblings[idx], siblings[new_idx] = siblings[new_idx], siblings[idx]
    return update_node(root, parent.id, {"children": siblings})


def clone_node(node: Node, ids: IdAllocator) -> Node:
    """Deep copy with a fresh id for the node and every descendant."""
    return replace(
        node,
        id=ids.next_id(),
        children=tuple(clone_node(c, ids) for c in node.children),
    )


def duplicate_node(root: Node, node_id: str, ids: IdAllocator) -> Node:
    """Clone a node and append the copy to the same parent."""
    node = find_node(root, node_id)
    parent = find_parent(root, node_id)
    if node is None or parent is None:
        return root
    return add_child(root, parent.id, clone_node(node, ids))


def insertion_parent(root: Node, selected_id: str | None) -> Node:
    """
    Where a new or pasted element goes: the selected node if it is a
    container, otherwise the selected node's parent, otherwise the root.
    """
    if selected_id is None:
        return root
    node = find_node(root, selected_id)
    if node is None:
        return root
    if node.container:
        return node
    return find_parent(root, selected_id) or root


def flatten_tree(node: Node) -> list[Node]:
    """Pre-order list of the subtree, node itself first."""
    return list(node.depth_first())


def count_nodes(node: Node) -> int:
    return sum(1 for _ in node.depth_first())
