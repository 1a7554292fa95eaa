"""
In-memory owner of the canonical resource forest.

Mutations never touch the current forest: they copy the category and the
ancestors of the affected node, rebuild that lineage and then swap the new
forest in. Untouched subtrees are shared between internal versions, which is
safe because nothing inside the store mutates a node after creation; callers
only ever see deep copies.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from typing import Any, Callable, Iterable, Mapping, Sequence

from .interface import ResourceService
from .models import Category, NodeData, NodePatch, ResourceNode, coerce_forest, coerce_node_data, coerce_patch, coerce_path
from .resolver import PathNotFound, resolve_lineage
from .tree import MAX_DEPTH, Lineage, TreeDepthError, check_forest, find_lineage, subtree_ids

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_id() -> str:
    """Return an id such as ``resource_1718030123456_k3j9x0q2a``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"resource_{int(time.time() * 1000)}_{suffix}"


def _replace_in(nodes: Sequence[ResourceNode], old: ResourceNode, new: ResourceNode | None) -> list[ResourceNode]:
    """Copy ``nodes`` with ``old`` (matched by identity) replaced by ``new``, or removed if ``new`` is None."""
    for index, node in enumerate(nodes):
        if node is old:
            return [*nodes[:index], *([new] if new is not None else []), *nodes[index + 1:]]
    raise ValueError(f"Node {old.id!r} is not part of the given sequence")


def _rebuild(forest: Sequence[Category], category_index: int, lineage: Lineage, replacement: ResourceNode | None) -> list[Category]:
    """Return a new forest where the last node of ``lineage`` is replaced (or removed)."""
    target, new = lineage[-1], replacement
    for parent in reversed(lineage[:-1]):
        siblings = _replace_in(parent.children or [], target, new)
        target, new = parent, parent.model_copy(update={"children": siblings})
    category = forest[category_index]
    new_forest = list(forest)
    new_forest[category_index] = category.model_copy(update={"items": _replace_in(category.items, target, new)})
    return new_forest


class CatalogStore(ResourceService):
    """
    Sole owner and mutator of the canonical forest.

    Args:
        initial: the seed forest (models, mappings, YAML/JSON text or a Path); deep-copied.
        id_factory: callable producing candidate ids for new resources.
    """

    def __init__(self, initial: Any = None, id_factory: Callable[[], str] | None = None):
        forest = coerce_forest(initial)
        self._ids: set[str] = check_forest(forest)
        self._forest: list[Category] = forest
        self._id_factory = id_factory or generate_id
        self._revision = 0
        self._last_applied = False
        logger.info(f"Catalog store seeded with {len(forest)} categories, {len(self._ids)} resources")

    @property
    def revision(self) -> int:
        """Incremented each time a mutation is applied."""
        return self._revision

    @property
    def last_applied(self) -> bool:
        """Whether the most recent mutation changed the forest."""
        return self._last_applied

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self._ids

    def get_snapshot(self) -> list[Category]:
        """Return a deep, independent copy of the current forest."""
        return [category.model_copy(deep=True) for category in self._forest]

    def add_resource(self, path: Iterable[Any], data: NodeData | Mapping[str, Any]) -> list[Category]:
        entries = coerce_path(path)
        node = coerce_node_data(data).build(self._new_id())

        if not entries:
            index = next((i for i, c in enumerate(self._forest) if c.kind == node.kind), None)
            if index is None:
                return self._skip(f"add {node.name!r}: no category of kind {node.kind!r}")
            category = self._forest[index]
            forest = list(self._forest)
            forest[index] = category.model_copy(update={"items": [*category.items, node]})
        else:
            try:
                index, lineage = resolve_lineage(self._forest, entries)
            except PathNotFound as exc:
                return self._skip(f"add {node.name!r}: {exc}")
            if len(entries) >= MAX_DEPTH:
                raise TreeDepthError(f"Cannot add below depth {MAX_DEPTH}")
            parent = lineage[-1]
            grown = parent.model_copy(update={"children": [*(parent.children or []), node]})
            forest = _rebuild(self._forest, index, lineage, grown)

        self._ids.add(node.id)
        logger.debug(f"Added resource {node.id} ({node.name!r}) at depth {len(entries)}")
        return self._commit(forest)

    def update_resource(self, resource_id: str, patch: NodePatch | Mapping[str, Any]) -> list[Category]:
        changes = coerce_patch(patch).changes()
        found = find_lineage(self._forest, resource_id)
        if found is None:
            return self._skip(f"update {resource_id!r}: not found")
        index, lineage = found
        patched = lineage[-1].model_copy(update=changes)
        logger.debug(f"Updated resource {resource_id}: {sorted(changes)}")
        return self._commit(_rebuild(self._forest, index, lineage, patched))

    def delete_resource(self, resource_id: str) -> list[Category]:
        found = find_lineage(self._forest, resource_id)
        if found is None:
            return self._skip(f"delete {resource_id!r}: not found")
        index, lineage = found
        removed = subtree_ids(lineage[-1])
        self._ids.difference_update(removed)
        logger.debug(f"Deleted resource {resource_id} and {len(removed) - 1} descendants")
        return self._commit(_rebuild(self._forest, index, lineage, None))

    # ------------------------------------------------------------------
    # internals

    def _new_id(self) -> str:
        while True:
            candidate = self._id_factory()
            if candidate not in self._ids:
                return candidate
            logger.warning(f"Generated id {candidate!r} already in use, retrying")

    def _commit(self, forest: list[Category]) -> list[Category]:
        self._forest = forest
        self._revision += 1
        self._last_applied = True
        return self.get_snapshot()

    def _skip(self, reason: str) -> list[Category]:
        logger.info(f"No-op mutation: {reason}")
        self._last_applied = False
        return self.get_snapshot()


def create_resource_service(initial: Any = None) -> ResourceService:
    """Factory returning the default (in-memory) resource service."""
    return CatalogStore(initial)


__all__ = ["CatalogStore", "create_resource_service", "generate_id"]
