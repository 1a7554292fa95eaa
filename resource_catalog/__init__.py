"""Core resource catalog package: tree model, path resolution, search, store and navigation."""

from .interface import ResourceService
from .loader import dump_catalog, load_catalog
from .models import BreadcrumbEntry, Category, NodeData, NodePatch, NodeShape, ResourceNode
from .navigator import Navigator, Selection
from .resolver import PathNotFound, resolve, resolve_node, visible_items
from .search import SEPARATOR, SearchMatch, iter_matches, search
from .store import CatalogStore, create_resource_service
from .tree import MAX_DEPTH, TreeDepthError, root_view

__all__ = [
    "BreadcrumbEntry",
    "CatalogStore",
    "Category",
    "MAX_DEPTH",
    "Navigator",
    "NodeData",
    "NodePatch",
    "NodeShape",
    "PathNotFound",
    "ResourceNode",
    "ResourceService",
    "SEPARATOR",
    "SearchMatch",
    "Selection",
    "TreeDepthError",
    "create_resource_service",
    "dump_catalog",
    "iter_matches",
    "load_catalog",
    "resolve",
    "resolve_node",
    "root_view",
    "search",
    "visible_items",
]
