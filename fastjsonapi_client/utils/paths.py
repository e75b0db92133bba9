"""Resource path helpers."""

from __future__ import annotations


def collection_name(resource_type: str) -> str:
    """Return the collection segment for ``resource_type``.

    Pluralization is a plain "s" suffix; irregular nouns are not handled and
    callers depend on the literal path shape.
    """
    return f"{resource_type}s"


def resource_path(base_path: str, resource_type: str, resource_id: str = "") -> str:
    """Return ``<base_path>/<type>s`` with ``/<id>`` appended when given."""
    if not base_path.endswith("/"):
        base_path = f"{base_path}/"
    path = f"{base_path}{collection_name(resource_type)}"
    if resource_id:
        path = f"{path}/{resource_id}"
    return path
