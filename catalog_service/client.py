from typing import Any, Iterable, Mapping
from urllib.parse import quote

import httpx

from resource_catalog.interface import ResourceService
from resource_catalog.models import Category, NodeData, NodePatch, coerce_forest, coerce_node_data, coerce_patch, coerce_path


def _resource_endpoint(resource_id: str) -> str:
    # ids are arbitrary strings: '/', '?' and '#' must not reach the URL raw
    return f"/resources/{quote(resource_id, safe='')}"


class RemoteCatalogService(ResourceService):
    """
    A resource service backed by the catalog REST API.
    404 answers are mapped back to the store's no-op contract: the current
    snapshot is returned and ``last_applied`` is False.

    Args:
        base_URL (str): The base URL of the catalog API.
            Must include scheme (http:// or https://) and optionally port.
            Example: "http://localhost:8000"
        client (httpx.Client): optional preconfigured client (e.g. a FastAPI TestClient);
            when given, ``base_URL`` is ignored.
    """

    def __init__(self, base_URL: str = "http://127.0.0.1:8000", client: httpx.Client | None = None):
        self.base_URL = base_URL
        self._client = client if client is not None else httpx.Client(base_url=base_URL)
        self._last_applied = False

    def request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Make an HTTP request to the catalog API.
        raise_for_status() is called on the response, except for 404.
        """
        response = self._client.request(method, endpoint, **kwargs)
        if response.status_code != 404:
            response.raise_for_status()
        return response

    @property
    def last_applied(self) -> bool:
        return self._last_applied

    @property
    def status(self) -> dict[str, Any]:
        return self.request("GET", "/status").json()

    def get_snapshot(self) -> list[Category]:
        return coerce_forest(self.request("GET", "/categories").json())

    def add_resource(self, path: Iterable[Any], data: NodeData | Mapping[str, Any]) -> list[Category]:
        body = {
            "path": [entry.model_dump() for entry in coerce_path(path)],
            "resource": coerce_node_data(data).model_dump(),
        }
        return self._mutation(self.request("POST", "/resources", json=body))

    def update_resource(self, resource_id: str, patch: NodePatch | Mapping[str, Any]) -> list[Category]:
        changes = coerce_patch(patch).changes()
        return self._mutation(self.request("PATCH", _resource_endpoint(resource_id), json=changes))

    def delete_resource(self, resource_id: str) -> list[Category]:
        return self._mutation(self.request("DELETE", _resource_endpoint(resource_id)))

    def close(self) -> None:
        self._client.close()

    def _mutation(self, response: httpx.Response) -> list[Category]:
        if response.status_code == 404:
            self._last_applied = False
            return self.get_snapshot()
        self._last_applied = True
        return coerce_forest(response.json())
