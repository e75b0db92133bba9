"""JSON:API document construction and rendering."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Union

if TYPE_CHECKING:
    from fastjsonapi_client.schemas.resource import ResourceObject

ResourceLike = Union["ResourceObject", Mapping[str, Any]]


def _resource_dict(resource: ResourceLike) -> dict[str, Any]:
    if isinstance(resource, Mapping):
        return dict(resource)
    return resource.to_wire()


class JSONAPIDocumentBuilder:
    """Build JSON:API v1.1 documents from resource objects."""

    def build_single(
        self,
        resource: ResourceLike,
        *,
        links: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API document for a single resource object."""
        document: dict[str, Any] = {"data": _resource_dict(resource)}
        if links:
            document["links"] = dict(links)
        if meta:
            document["meta"] = dict(meta)
        return document

    def build_collection(
        self,
        resources: Iterable[ResourceLike],
        *,
        links: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API document for a collection of resources."""
        document: dict[str, Any] = {"data": [_resource_dict(item) for item in resources]}
        if links:
            document["links"] = dict(links)
        if meta:
            document["meta"] = dict(meta)
        return document

    def render(self, document: Mapping[str, Any], *, indent: int | None = 2) -> bytes:
        """Serialize ``document`` to UTF-8 JSON with a stable indent.

        Raises ``ValueError`` for values with no JSON form, such as ``NaN``.
        """
        text = json.dumps(document, indent=indent, ensure_ascii=False, allow_nan=False)
        return text.encode("utf-8")
