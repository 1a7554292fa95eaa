"""Bounded pre-order traversal over a forest of categories."""

from __future__ import annotations

from typing import Iterator, Sequence

from .models import Category, NodeShape, ResourceNode

MAX_DEPTH = 64

Lineage = tuple[ResourceNode, ...]


class TreeDepthError(ValueError):
    """Raised when a forest nests deeper than MAX_DEPTH."""


def walk(items: Sequence[ResourceNode], max_depth: int = MAX_DEPTH) -> Iterator[tuple[Lineage, ResourceNode]]:
    """Yield ``(ancestors, node)`` pairs in pre-order, using an explicit stack."""
    stack: list[tuple[Lineage, ResourceNode]] = [((), node) for node in reversed(items)]
    while stack:
        ancestors, node = stack.pop()
        if len(ancestors) >= max_depth:
            raise TreeDepthError(f"Node {node.id!r} is nested deeper than {max_depth} levels")
        yield ancestors, node
        if node.shape is NodeShape.CONTAINER:
            lineage = ancestors + (node,)
            stack.extend((lineage, child) for child in reversed(node.children))


def walk_forest(forest: Sequence[Category], max_depth: int = MAX_DEPTH) -> Iterator[tuple[int, Lineage, ResourceNode]]:
    """Like walk, across every category in order; also yields the category index."""
    for index, category in enumerate(forest):
        for ancestors, node in walk(category.items, max_depth):
            yield index, ancestors, node


def find_lineage(forest: Sequence[Category], node_id: str) -> tuple[int, Lineage] | None:
    """Return the category index and lineage (ancestors plus the node) of the first node with ``node_id``."""
    for index, ancestors, node in walk_forest(forest):
        if node.id == node_id:
            return index, ancestors + (node,)
    return None


def root_view(forest: Sequence[Category]) -> list[ResourceNode]:
    """Top-level items of every category, in category order then item order."""
    return [item for category in forest for item in category.items]


def subtree_ids(node: ResourceNode) -> list[str]:
    return [node.id] + [child.id for _, child in walk(node.children or [])]


def check_forest(forest: Sequence[Category]) -> set[str]:
    """Validate id uniqueness and depth; return the set of node ids."""
    seen: set[str] = set()
    for _, _, node in walk_forest(forest):
        if node.id in seen:
            raise ValueError(f"Duplicate resource id: {node.id!r}")
        seen.add(node.id)
    return seen


__all__ = [
    "MAX_DEPTH",
    "Lineage",
    "TreeDepthError",
    "check_forest",
    "find_lineage",
    "root_view",
    "subtree_ids",
    "walk",
    "walk_forest",
]
