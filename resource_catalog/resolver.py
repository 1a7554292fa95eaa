"""
Path resolution: turn a breadcrumb path back into nodes of a forest.

Breadcrumbs carry ids only and are re-resolved against whatever forest is
current, so a path captured before an edit still works afterwards as long as
the nodes it names survive.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from .models import BreadcrumbEntry, Category, NodeShape, ResourceNode, coerce_path
from .tree import Lineage, root_view

logger = logging.getLogger(__name__)


class PathNotFound(LookupError):
    """A breadcrumb path does not resolve in the given forest."""

    def __init__(self, path: Sequence[BreadcrumbEntry], depth: int):
        self.path = list(path)
        self.depth = depth
        trail = " > ".join(entry.id for entry in self.path[: depth + 1])
        super().__init__(f"Path does not resolve at step {depth}: {trail}")


def _first_with_id(nodes: Iterable[ResourceNode], node_id: str) -> ResourceNode | None:
    for node in nodes:
        if node.id == node_id:
            return node
    return None


def resolve_lineage(forest: Sequence[Category], path: Iterable[Any]) -> tuple[int, Lineage]:
    """
    Walk ``path`` from the root view and return ``(category_index, lineage)``.

    The lineage holds one node per path entry. Raises PathNotFound when a step
    is missing, when a non-terminal step has no children, or when the path is
    empty (an empty path names no node).
    """
    entries = coerce_path(path)
    if not entries:
        raise PathNotFound(entries, 0)

    head = None
    category_index = -1
    for category_index, category in enumerate(forest):
        head = _first_with_id(category.items, entries[0].id)
        if head is not None:
            break
    if head is None:
        raise PathNotFound(entries, 0)

    lineage = [head]
    for depth, entry in enumerate(entries[1:], start=1):
        parent = lineage[-1]
        if parent.shape is NodeShape.LEAF:
            raise PathNotFound(entries, depth)
        node = _first_with_id(parent.children, entry.id)
        if node is None:
            raise PathNotFound(entries, depth)
        lineage.append(node)
    return category_index, tuple(lineage)


def resolve_node(forest: Sequence[Category], path: Iterable[Any]) -> ResourceNode:
    """Return the node named by the last entry of ``path``."""
    return resolve_lineage(forest, path)[1][-1]


def resolve(forest: Sequence[Category], path: Iterable[Any] | None) -> list[ResourceNode]:
    """
    Return the item list visible at ``path``.

    An empty path gives the root view. Otherwise the result is the children of
    the terminal node (empty when it has none). Raises PathNotFound.
    """
    entries = coerce_path(path)
    if not entries:
        return root_view(forest)
    return list(resolve_node(forest, entries).children or [])


def visible_items(forest: Sequence[Category], path: Iterable[Any] | None) -> list[ResourceNode]:
    """Like resolve, but an unresolvable path shows nothing instead of raising."""
    try:
        return resolve(forest, path)
    except PathNotFound as exc:
        logger.debug(f"Nothing visible: {exc}")
        return []


__all__ = [
    "PathNotFound",
    "resolve",
    "resolve_lineage",
    "resolve_node",
    "visible_items",
]
