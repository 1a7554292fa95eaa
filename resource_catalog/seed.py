"""Default demo forest used when no catalog file is configured."""

from typing import Any


def _leaf(node_id: str, name: str, icon: str, has_details: bool = False) -> dict[str, Any]:
    return {"id": node_id, "name": name, "kind": "resource", "icon": icon, "has_details": has_details}


SEED_CATEGORIES: list[dict[str, Any]] = [
    {"id": "all-resources", "name": "All Resources", "kind": "resource", "items": []},
    {
        "id": "record-variables",
        "name": "Record Variables",
        "kind": "resource",
        "items": [
            {
                **_leaf("account", "Account", "document", True),
                "children": [
                    _leaf("account-entire", "Entire Resource", "file-text", True),
                    {
                        **_leaf("account-relationship", "Relationship Fields", "link"),
                        "children": [
                            _leaf("account-id", "Account ID", "id"),
                            _leaf("contact-id", "Contact ID", "user"),
                            _leaf("created-by-id", "Created By ID", "user", True),
                            _leaf("individual-id", "Individual ID", "user"),
                            _leaf("last-modified-by-id", "Last Modified By ID", "user"),
                            _leaf("manager-id", "Manager ID", "user"),
                        ],
                    },
                ],
            },
            {
                **_leaf("contact", "Contact", "document", True),
                "children": [
                    _leaf("contact-entire", "Entire Resource", "file-text", True),
                    {
                        **_leaf("contact-fields", "Contact Fields", "tag"),
                        "children": [
                            _leaf("contact-name", "Name", "tag"),
                            _leaf("contact-email", "Email", "mail"),
                            _leaf("contact-phone", "Phone", "phone"),
                        ],
                    },
                ],
            },
        ],
    },
    {
        "id": "global-variables",
        "name": "Global Variables",
        "kind": "resource",
        "items": [
            {
                **_leaf("api", "API", "globe", True),
                "children": [
                    _leaf("api-config", "API Configuration", "settings"),
                    _leaf("api-endpoints", "API Endpoints", "link"),
                ],
            },
        ],
    },
]
