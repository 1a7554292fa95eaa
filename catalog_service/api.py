"""
catalog_service.api
-------------------
REST facade over a CatalogStore, built with FastAPI.
It exposes browsing, search and the add/update/delete mutations of the
in-memory catalog so that a presentation layer can drive it over HTTP.
Every mutation answers with the full forest snapshot.
"""
import logging
from typing import Any

import uvicorn
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from catalog_service.forms import clean_resource_form
from resource_catalog.models import DEFAULT_KIND, BreadcrumbEntry, Category, ResourceNode
from resource_catalog.resolver import visible_items
from resource_catalog.search import search
from resource_catalog.store import CatalogStore

logger = logging.getLogger(__name__)


# Pydantic models for request validation
class NewResourceModel(BaseModel):
    name: str
    kind: str = DEFAULT_KIND
    icon: str | None = None
    description: str | None = None
    has_details: bool = False
    expandable: bool = False


class AddResourceRequest(BaseModel):
    path: list[BreadcrumbEntry] = Field(default_factory=list)
    resource: NewResourceModel


def create_app(store: CatalogStore | None = None) -> FastAPI:
    """Build the FastAPI app serving ``store`` (an empty store if None)."""
    app = FastAPI(title="Resource catalog")
    app.state.store = store if store is not None else CatalogStore()

    def current() -> CatalogStore:
        return app.state.store

    @app.get("/status")
    def status():
        """Health/status endpoint."""
        store = current()
        forest = store.get_snapshot()
        return {"status": "ok", "categories": len(forest), "resources": len(store), "revision": store.revision}

    @app.get("/categories", response_model=list[Category])
    def list_categories() -> list[Category]:
        return current().get_snapshot()

    @app.get("/items", response_model=list[ResourceNode])
    def list_items(path: list[str] = Query(default=[])) -> list[ResourceNode]:
        """Items visible at the breadcrumb path given as repeated ``path`` ids."""
        logger.info(f"Listing items at path {path!r}")
        return visible_items(current().get_snapshot(), path)

    @app.get("/search", response_model=list[ResourceNode])
    def search_resources(q: str = "") -> list[ResourceNode]:
        logger.info(f"Searching resources: {q!r}")
        return search(current().get_snapshot(), q)

    @app.post("/resources", response_model=list[Category], status_code=201)
    def add_resource(request: AddResourceRequest) -> list[Category]:
        resource = request.resource
        try:
            data = clean_resource_form(
                resource.name,
                description=resource.description,
                kind=resource.kind,
                icon=resource.icon,
                has_details=resource.has_details,
                expandable=resource.expandable,
            )
        except ValueError as exc:
            logger.warning(f"Invalid resource: {exc}")
            raise HTTPException(status_code=422, detail=str(exc))
        store = current()
        forest = store.add_resource(request.path, data)
        if not store.last_applied:
            raise HTTPException(status_code=404, detail="Path or category not found")
        logger.info(f"Added resource {data.name!r} at {[e.id for e in request.path]!r}")
        return forest

    @app.patch("/resources/{resource_id:path}", response_model=list[Category])
    def update_resource(resource_id: str, patch: dict[str, Any]) -> list[Category]:
        if "name" in patch and (not isinstance(patch["name"], str) or not patch["name"].strip()):
            logger.debug(f"Invalid 'name' in update: {patch['name']!r}")
            raise HTTPException(status_code=422, detail="Missing or invalid 'name' field in update")
        store = current()
        try:
            forest = store.update_resource(resource_id, patch)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc))
        if not store.last_applied:
            logger.warning(f"Resource not found for update: {resource_id}")
            raise HTTPException(status_code=404, detail="Resource not found")
        return forest

    @app.delete("/resources/{resource_id:path}", response_model=list[Category])
    def delete_resource(resource_id: str) -> list[Category]:
        logger.info(f"Deleting resource: {resource_id}")
        store = current()
        forest = store.delete_resource(resource_id)
        if not store.last_applied:
            logger.warning(f"Resource not found for deletion: {resource_id}")
            raise HTTPException(status_code=404, detail="Resource not found")
        return forest

    return app


def serve(store: CatalogStore, host: str = "127.0.0.1", port: int = 8000) -> None:
    """Run the REST facade with uvicorn until interrupted."""
    config = uvicorn.Config(create_app(store), host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    logger.info(f"Starting Uvicorn server on {host}:{port}")
    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt in main thread")
    logger.info("Server stopped")
