from typing import Any, Iterable, Mapping, Protocol

from .models import Category, NodeData, NodePatch


class ResourceService(Protocol):
    """
    Protocol for anything that owns a resource forest.
    Implementations: CatalogStore (in memory) and RemoteCatalogService (REST).

    Every mutation returns the full forest snapshot that the caller should
    treat as the new source of truth. A mutation whose target cannot be found
    is a no-op; ``last_applied`` tells the two apart.
    """

    @property
    def last_applied(self) -> bool: ...

    def get_snapshot(self) -> list[Category]: ...

    def add_resource(self, path: Iterable[Any], data: NodeData | Mapping[str, Any]) -> list[Category]:
        """
        Add a resource under the node named by the end of ``path``.
        An empty path adds it to the first category whose kind matches.
        """
        ...

    def update_resource(self, resource_id: str, patch: NodePatch | Mapping[str, Any]) -> list[Category]:
        """
        Merge the supplied fields into the resource with ``resource_id``.
        Unspecified fields remain unchanged.
        """
        ...

    def delete_resource(self, resource_id: str) -> list[Category]:
        """Remove the resource with ``resource_id`` together with its subtree."""
        ...
