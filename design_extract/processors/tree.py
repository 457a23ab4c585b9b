"""Depth-first walker over the Figma document tree.

Two modes are used by the engines:
- collector: ``walk_nodes`` / ``iter_nodes`` / ``count_values`` visit every node
- finder: ``find_node_by_id`` stops at the first node with a matching id

Nodes are plain dicts; a missing or non-list ``children`` means leaf. Each
node object is visited at most once, so a malformed payload that reuses a
dict as its own descendant cannot recurse forever.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Set

Node = Dict[str, Any]


def _children(node: Node) -> List[Node]:
    children = node.get("children")
    if not isinstance(children, list):
        return []
    return [c for c in children if isinstance(c, dict)]


def iter_nodes(root: Optional[Node]) -> Iterator[Node]:
    """Yield nodes in pre-order (parent before children, children in order)."""
    if not isinstance(root, dict):
        return
    visited: Set[int] = set()
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        if id(node) in visited:
            continue
        visited.add(id(node))
        yield node
        stack.extend(reversed(_children(node)))


def walk_nodes(root: Optional[Node], visitor: Callable[[Node], None]) -> None:
    """Invoke ``visitor`` on every node of the tree (collector mode)."""
    for node in iter_nodes(root):
        visitor(node)


def find_node_by_id(root: Optional[Node], node_id: str) -> Optional[Node]:
    """Return the first node whose ``id`` equals ``node_id`` (finder mode)."""
    for node in iter_nodes(root):
        if node.get("id") == node_id:
            return node
    return None


def find_nodes_by_type(root: Optional[Node], node_types: Iterable[str]) -> List[Node]:
    """Collect every node whose ``type`` is in ``node_types``, in traversal order."""
    wanted = set(node_types)
    return [node for node in iter_nodes(root) if node.get("type") in wanted]


def count_values(
    root: Optional[Node],
    extract: Callable[[Node], Iterable[float]],
) -> Counter:
    """Count the values ``extract`` yields per node across the whole tree.

    Counter keeps first-seen insertion order, so ``most_common()`` breaks
    frequency ties by first occurrence during traversal.
    """
    counts: Counter = Counter()
    walk_nodes(root, lambda node: counts.update(extract(node)))
    return counts
