"""Session-local cursor over a resource service: breadcrumbs, visible items and search."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from .interface import ResourceService
from .models import BreadcrumbEntry, Category, NodeData, ResourceNode
from .resolver import visible_items
from .search import SEPARATOR, iter_matches

logger = logging.getLogger(__name__)

# prefix of the path shown in the input box, e.g. "{!Account.Relationship Fields.}"
PATH_DISPLAY_PREFIX = "{!"

SelectHandler = Callable[[ResourceNode, list[BreadcrumbEntry]], Any]
AddRequestHandler = Callable[[list[BreadcrumbEntry]], Any]


@dataclass(frozen=True)
class Selection:
    """A terminal node chosen by the user, with the full path that leads to it."""

    node: ResourceNode
    path: tuple[BreadcrumbEntry, ...]

    @property
    def label(self) -> str:
        return SEPARATOR.join(entry.name for entry in self.path)


class Navigator:
    """
    Tracks where one user is in the hierarchy.

    The item list is never stored: it is resolved from ``current_path`` against
    the newest snapshot of the service every time it is read, so the cursor
    survives edits made through the service.
    """

    def __init__(
        self,
        service: ResourceService,
        on_select: Optional[SelectHandler] = None,
        on_add_request: Optional[AddRequestHandler] = None,
    ):
        self.service = service
        self.on_select = on_select
        self.on_add_request = on_add_request
        self.current_path: list[BreadcrumbEntry] = []
        self.query = ""
        self.selected: ResourceNode | None = None
        self._forest: list[Category] | None = None
        self._revision: int | None = None
        # search hit id -> breadcrumbs of the hit, rebuilt on every search
        self._hit_paths: dict[str, list[BreadcrumbEntry]] = {}

    # ------------------------------------------------------------------
    # views

    @property
    def forest(self) -> list[Category]:
        """Latest snapshot; re-read whenever the service reports a new revision.

        This cached forest is shared between reads and must not be mutated;
        ``visible_items`` and ``items`` hand out copies.
        """
        revision = getattr(self.service, "revision", None)
        if self._forest is None or revision is None or revision != self._revision:
            self._forest = self.service.get_snapshot()
            self._revision = revision
        return self._forest

    @property
    def visible_items(self) -> list[ResourceNode]:
        return [node.model_copy(deep=True) for node in visible_items(self.forest, self.current_path)]

    @property
    def searching(self) -> bool:
        return bool(self.query.strip())

    @property
    def items(self) -> list[ResourceNode]:
        """What to show: search hits (renamed to their path) while a query is active, else the visible items."""
        if not self.searching:
            return self.visible_items
        matches = list(iter_matches(self.forest, self.query))
        self._hit_paths = {match.node.id: match.breadcrumbs for match in matches}
        return [match.as_node().model_copy(deep=True) for match in matches]

    def display_value(self) -> str:
        """Text for the input box: query, selected name, or the current path."""
        if self.searching:
            return self.query
        if self.selected is not None:
            return self.selected.name
        if self.current_path:
            return PATH_DISPLAY_PREFIX + ".".join(entry.name for entry in self.current_path) + ".}"
        return ""

    def location_label(self) -> str:
        return SEPARATOR.join(entry.name for entry in self.current_path)

    # ------------------------------------------------------------------
    # operations

    def set_query(self, text: str) -> None:
        """Update the search term the way typing in the input box does."""
        self.query = text
        if not text.strip():
            self.current_path = []
            self.selected = None
            self.query = ""
            return
        if not text.startswith(PATH_DISPLAY_PREFIX):
            self.current_path = []
            self.selected = None

    def enter(self, node: ResourceNode) -> Selection | None:
        """
        Move into ``node`` if it has children, otherwise select it.

        Returns the Selection for a terminal node, None when the cursor moved.
        """
        path = self._path_to(node)
        if node.has_children:
            self.current_path = path
            self.query = ""
            logger.debug(f"Entered {self.location_label()!r}")
            return None

        selection = Selection(node=node, path=tuple(path))
        self.selected = node
        self.query = ""
        logger.debug(f"Selected {node.id} at {selection.label!r}")
        if self.on_select is not None:
            self.on_select(node, list(selection.path))
        return selection

    def jump_to_breadcrumb(self, index: int) -> None:
        """Go back to the breadcrumb at ``index``; -1 is the root."""
        if index < -1:
            raise IndexError(f"Breadcrumb index out of range: {index}")
        self.current_path = self.current_path[: index + 1]
        self.query = ""

    def reset(self) -> None:
        self.jump_to_breadcrumb(-1)
        self.query = ""
        self.selected = None

    def request_add(self) -> list[BreadcrumbEntry]:
        """Report the current path as the place to add a new resource."""
        path = list(self.current_path)
        if self.on_add_request is not None:
            self.on_add_request(path)
        return path

    def add_here(self, data: NodeData | Mapping[str, Any]) -> list[Category]:
        """Add a resource at the current path through the service."""
        forest = self.service.add_resource(self.current_path, data)
        self._forest, self._revision = forest, getattr(self.service, "revision", None)
        return forest

    def _path_to(self, node: ResourceNode) -> list[BreadcrumbEntry]:
        if self.searching and node.id in self._hit_paths:
            return list(self._hit_paths[node.id])
        return [*self.current_path, node.breadcrumb()]


__all__ = ["Navigator", "Selection", "PATH_DISPLAY_PREFIX"]
