"""Validation of user-entered resource forms, done before the core store is called."""

from typing import Optional

from resource_catalog.models import DEFAULT_KIND, NodeData

NAME_MAX_LENGTH = 50


def clean_resource_form(
    name: str,
    description: Optional[str] = None,
    kind: str = DEFAULT_KIND,
    icon: Optional[str] = None,
    has_details: bool = False,
    expandable: bool = False,
) -> NodeData:
    """
    Check the add-resource form and return the NodeData to hand to the store.

    The name is required and limited to NAME_MAX_LENGTH characters; name and
    description are trimmed, and a blank description is dropped.
    Raises ValueError with a user-facing message.
    """
    if not name or not name.strip():
        raise ValueError("Name is required")
    if len(name) > NAME_MAX_LENGTH:
        raise ValueError(f"Name must be at most {NAME_MAX_LENGTH} characters")
    return NodeData(
        name=name.strip(),
        kind=kind,
        icon=icon,
        description=(description or "").strip() or None,
        has_details=has_details,
        expandable=expandable,
    )
