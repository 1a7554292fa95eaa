"""Pydantic models for the resource catalog: nodes, categories and breadcrumbs."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

DEFAULT_KIND = "resource"


class NodeShape(str, Enum):
    """Whether a node can hold children."""
    LEAF = "leaf"
    CONTAINER = "container"


class BreadcrumbEntry(BaseModel):
    """Lightweight projection of a node used to address it along a path."""

    id: str
    name: str = ""
    kind: str = Field(default=DEFAULT_KIND, validation_alias=AliasChoices("kind", "type"))


class ResourceNode(BaseModel):
    """
    A node in the resource hierarchy.

    ``children`` is ``None`` for a plain leaf. An empty list marks an
    expandable container that currently has no children; the two are
    kept distinct through every copy and mutation.
    """

    id: str
    name: str
    kind: str = Field(default=DEFAULT_KIND, validation_alias=AliasChoices("kind", "type"))
    icon: Optional[str] = None  # opaque glyph reference, never interpreted here
    description: Optional[str] = None
    has_details: bool = Field(default=False, validation_alias=AliasChoices("has_details", "hasDetails"))
    children: Optional[list[ResourceNode]] = None

    @property
    def shape(self) -> NodeShape:
        """LEAF when ``children`` is absent, CONTAINER otherwise (even when empty)."""
        return NodeShape.LEAF if self.children is None else NodeShape.CONTAINER

    @property
    def has_children(self) -> bool:
        """True when the node can be navigated into (a non-empty container)."""
        return self.shape is NodeShape.CONTAINER and len(self.children) > 0

    def breadcrumb(self) -> BreadcrumbEntry:
        return BreadcrumbEntry(id=self.id, name=self.name, kind=self.kind)


class Category(BaseModel):
    """Top-level grouping of resources."""

    id: str
    name: str
    kind: str = Field(default=DEFAULT_KIND, validation_alias=AliasChoices("kind", "type"))
    items: list[ResourceNode] = Field(default_factory=list)


class NodeData(BaseModel):
    """Payload describing a resource to add; the store assigns the id."""

    model_config = ConfigDict(extra="forbid")

    name: str
    kind: str = Field(default=DEFAULT_KIND, validation_alias=AliasChoices("kind", "type"))
    icon: Optional[str] = None
    description: Optional[str] = None
    has_details: bool = Field(default=False, validation_alias=AliasChoices("has_details", "hasDetails"))
    expandable: bool = Field(default=False, description="Create the node with an empty children list")

    def build(self, node_id: str) -> ResourceNode:
        """Return the new node carrying ``node_id``."""
        return ResourceNode(
            id=node_id,
            name=self.name,
            kind=self.kind,
            icon=self.icon,
            description=self.description,
            has_details=self.has_details,
            children=[] if self.expandable else None,
        )


# fields a patch may set back to None
_NULLABLE_PATCH_FIELDS = frozenset({"icon", "description"})


class NodePatch(BaseModel):
    """Partial update for an existing node. Ids and children are not patchable."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    kind: Optional[str] = Field(default=None, validation_alias=AliasChoices("kind", "type"))
    icon: Optional[str] = None
    description: Optional[str] = None
    has_details: Optional[bool] = Field(default=None, validation_alias=AliasChoices("has_details", "hasDetails"))

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller actually supplied."""
        supplied = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in supplied.items()
            if value is not None or key in _NULLABLE_PATCH_FIELDS
        }


# ---------------------------------------------------------------------------
# helpers

_FOREST_ADAPTER = TypeAdapter(list[Category])


def coerce_forest(value: Any) -> list[Category]:
    """Normalize supported inputs into a list of Category models.

    Accepts a sequence of categories (models or mappings), a mapping with a
    ``categories`` key, YAML/JSON text, or a Path to such a file. The result
    shares nothing with ``value``.
    """
    if isinstance(value, Path):
        value = _load_text_payload(value.read_text(encoding="utf-8"))
    elif isinstance(value, (str, bytes)):
        value = _load_text_payload(value)
    if value is None:
        return []
    if isinstance(value, Mapping):
        if "categories" not in value:
            raise ValueError("Catalog mapping must have a 'categories' key")
        value = value["categories"]
    if not isinstance(value, Iterable):
        raise TypeError(f"Unsupported catalog value: {type(value).__name__}")
    payload = [
        item.model_dump(mode="python") if isinstance(item, Category) else item
        for item in value
    ]
    try:
        return _FOREST_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid catalog payload: {exc}") from exc


def coerce_path(path: Iterable[Any] | None) -> list[BreadcrumbEntry]:
    """Normalize a breadcrumb path given as entries, mappings or bare ids."""
    if path is None:
        return []
    if isinstance(path, (str, bytes, Mapping, BreadcrumbEntry)):
        raise TypeError("A path is a sequence of breadcrumb entries, not a single entry")
    entries: list[BreadcrumbEntry] = []
    for step in path:
        if isinstance(step, BreadcrumbEntry):
            entries.append(step)
        elif isinstance(step, str):
            entries.append(BreadcrumbEntry(id=step))
        elif isinstance(step, Mapping):
            try:
                entries.append(BreadcrumbEntry.model_validate(step))
            except ValidationError as exc:
                raise ValueError(f"Invalid breadcrumb entry: {step!r}") from exc
        else:
            raise TypeError(f"Unsupported breadcrumb entry: {step!r}")
    return entries


def coerce_node_data(value: Any) -> NodeData:
    if isinstance(value, NodeData):
        return value
    if not isinstance(value, Mapping):
        raise TypeError("Unsupported value for new resource data")
    try:
        return NodeData.model_validate(value)
    except ValidationError as exc:
        raise ValueError(f"Invalid resource data: {exc}") from exc


def coerce_patch(value: Any) -> NodePatch:
    if isinstance(value, NodePatch):
        return value
    if not isinstance(value, Mapping):
        raise TypeError("Unsupported value for resource patch")
    try:
        return NodePatch.model_validate(value)
    except ValidationError as exc:
        raise ValueError(f"Invalid resource patch: {exc}") from exc


def _load_text_payload(raw: str | bytes) -> Any:
    """Interpret raw text as YAML first, falling back to JSON."""
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return json.loads(text)


__all__ = [
    "DEFAULT_KIND",
    "BreadcrumbEntry",
    "Category",
    "NodeData",
    "NodePatch",
    "NodeShape",
    "ResourceNode",
    "coerce_forest",
    "coerce_node_data",
    "coerce_patch",
    "coerce_path",
]
