"""Substring search across the whole hierarchy, labelled with full breadcrumb paths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from .models import BreadcrumbEntry, Category, ResourceNode
from .tree import root_view, walk_forest

SEPARATOR = " > "


@dataclass(frozen=True)
class SearchMatch:
    """A matching node together with the nodes above it in its category."""

    ancestors: tuple[ResourceNode, ...]
    node: ResourceNode

    @property
    def label(self) -> str:
        """Full path label, e.g. ``Account > Relationship Fields > Account ID``."""
        return SEPARATOR.join([a.name for a in self.ancestors] + [self.node.name])

    @property
    def breadcrumbs(self) -> list[BreadcrumbEntry]:
        """Breadcrumb path ending with the matching node itself."""
        return [a.breadcrumb() for a in self.ancestors] + [self.node.breadcrumb()]

    def as_node(self) -> ResourceNode:
        """Shallow copy of the node with its name replaced by the path label."""
        return self.node.model_copy(update={"name": self.label})


def iter_matches(forest: Sequence[Category], query: str) -> Iterator[SearchMatch]:
    """Yield every node whose name contains ``query`` (case-insensitive), in pre-order."""
    needle = query.casefold()
    for _, ancestors, node in walk_forest(forest):
        if needle in node.name.casefold():
            yield SearchMatch(ancestors, node)


def search(forest: Sequence[Category], query: str) -> list[ResourceNode]:
    """
    Return matching nodes renamed to their full path label.

    A blank query degrades to the root view. Ancestors and descendants that
    both match are reported separately.
    """
    if not query.strip():
        return root_view(forest)
    return [match.as_node() for match in iter_matches(forest, query)]


__all__ = ["SEPARATOR", "SearchMatch", "iter_matches", "search"]
