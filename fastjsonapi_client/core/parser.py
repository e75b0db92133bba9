"""Decode and validate JSON:API documents into resource objects."""

from __future__ import annotations

import json
import logging
from typing import IO, Any, Iterable, Mapping, Union

import httpx

from fastjsonapi_client.config import ClientSettings
from fastjsonapi_client.core.errors import (
    HeaderNegotiationError,
    InternalError,
    JSONAPIError,
    SpecificationError,
)
from fastjsonapi_client.schemas.resource import (
    Relationship,
    ResourceIdentifier,
    ResourceLinkage,
    ResourceObject,
    compact_json,
    reject_constant,
)
from fastjsonapi_client.utils.content_negotiation import validate_headers

logger = logging.getLogger(__name__)

Headers = Union[Mapping[str, str], httpx.Headers]
Body = Union[bytes, bytearray, str, IO[bytes], Iterable[bytes], None]

TYPE_POINTER = "/data/attributes/type"
ID_POINTER = "/data/attributes/id"
RELATIONSHIPS_POINTER = "/data/relationships"


def _escape_pointer(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _allows_empty_id(method: str) -> bool:
    return method.upper() == "POST"


def _close_body(body: Body) -> None:
    close = getattr(body, "close", None)
    if close is not None:
        close()


def _read_body(body: Body) -> bytes:
    """Drain ``body`` into bytes, closing it on every exit path."""
    if body is None:
        return b""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    try:
        if hasattr(body, "read"):
            content = body.read()
        else:
            content = b"".join(body)
    except OSError as exc:
        raise InternalError(f"Unable to read document body: {exc}") from exc
    finally:
        _close_body(body)
    if isinstance(content, str):
        return content.encode("utf-8")
    return content


def _load_document(
    headers: Headers, body: Body, settings: ClientSettings | None
) -> dict[str, Any]:
    try:
        validate_headers(headers, settings=settings)
    except HeaderNegotiationError:
        _close_body(body)
        raise
    raw = _read_body(body)
    try:
        document = json.loads(raw, parse_constant=reject_constant)
    except ValueError as exc:
        raise InternalError(f"Unable to decode JSON:API document: {exc}") from exc
    if not isinstance(document, dict):
        raise SpecificationError("A JSON:API document must be a JSON object.", pointer="")
    if "data" not in document:
        raise SpecificationError(
            "Document is missing the primary 'data' member.", pointer="/data"
        )
    return document


def _check_identity(resource_type: Any, resource_id: Any, *, method: str) -> None:
    if not isinstance(resource_type, str) or not resource_type:
        raise SpecificationError(
            "Resource object must have a non-empty 'type'.", pointer=TYPE_POINTER
        )
    if not isinstance(resource_id, str):
        raise SpecificationError("Resource 'id' must be a string.", pointer=ID_POINTER)
    if not resource_id and not _allows_empty_id(method):
        raise SpecificationError(
            f"Resource object must have an 'id' for HTTP method '{method.upper()}'.",
            pointer=ID_POINTER,
        )


def _check_identifier(members: Mapping[str, Any], pointer: str) -> None:
    for member in ("type", "id"):
        member_value = members.get(member)
        if not isinstance(member_value, str) or not member_value:
            raise SpecificationError(
                f"Resource identifier must have a non-empty '{member}'.",
                pointer=f"{pointer}/{member}",
            )


def _linkage_pointers(name: str, linkage: ResourceLinkage) -> list[str]:
    pointer = f"{RELATIONSHIPS_POINTER}/{_escape_pointer(name)}/data"
    if linkage.is_to_one:
        return [pointer] * len(linkage)
    return [f"{pointer}/{index}" for index in range(len(linkage))]


def validate_resource(resource: ResourceObject, *, method: str) -> None:
    """Check the method-conditional type/id rules for ``resource``.

    ``type`` is always required; an empty ``id`` is only valid for POST, where
    the server assigns one. Relationship identifiers always need both.
    """
    _check_identity(resource.type, resource.id, method=method)
    for name, relationship in (resource.relationships or {}).items():
        pointers = _linkage_pointers(name, relationship.data)
        for identifier, pointer in zip(relationship.data, pointers):
            _check_identifier(identifier.to_wire(), pointer)


def _parse_identifier(value: Any, pointer: str) -> ResourceIdentifier:
    if not isinstance(value, dict):
        raise SpecificationError(
            "Resource identifier must be an object.", pointer=pointer
        )
    _check_identifier(value, pointer)
    return ResourceIdentifier(type=value["type"], id=value["id"])


def _parse_linkage(value: Any, pointer: str) -> ResourceLinkage:
    if value is None:
        return ResourceLinkage.to_one()
    if isinstance(value, dict):
        return ResourceLinkage.to_one(_parse_identifier(value, pointer))
    if isinstance(value, list):
        return ResourceLinkage.to_many(
            _parse_identifier(item, f"{pointer}/{index}")
            for index, item in enumerate(value)
        )
    raise SpecificationError(
        "Resource linkage must be null, an object or an array.", pointer=pointer
    )


def _parse_relationships(value: Any) -> dict[str, Relationship]:
    if not isinstance(value, dict):
        raise SpecificationError(
            "Relationships must be an object.", pointer=RELATIONSHIPS_POINTER
        )
    relationships: dict[str, Relationship] = {}
    for name, relationship in value.items():
        pointer = f"{RELATIONSHIPS_POINTER}/{_escape_pointer(name)}"
        if not isinstance(relationship, dict) or "data" not in relationship:
            raise SpecificationError(
                f"Relationship '{name}' must be an object with a 'data' member.",
                pointer=pointer,
            )
        linkage = _parse_linkage(relationship["data"], f"{pointer}/data")
        relationships[name] = Relationship(data=linkage)
    return relationships


def _parse_resource(data: Any, *, method: str) -> ResourceObject:
    if not isinstance(data, dict):
        raise SpecificationError(
            "Primary data must be a resource object.", pointer="/data"
        )
    resource_type = data.get("type")
    resource_id = data.get("id")
    if resource_id is None:
        resource_id = ""
    _check_identity(resource_type, resource_id, method=method)

    attributes = data.get("attributes")
    if attributes is not None:
        try:
            attributes = compact_json(attributes)
        except ValueError as exc:
            raise InternalError(
                f"Unable to encode resource attributes: {exc}",
                pointer="/data/attributes",
            ) from exc

    relationships = None
    if "relationships" in data:
        relationships = _parse_relationships(data["relationships"])

    return ResourceObject(
        type=resource_type,
        id=resource_id,
        attributes=attributes,
        relationships=relationships,
    )


def parse_single(
    headers: Headers,
    body: Body,
    *,
    method: str = "GET",
    settings: ClientSettings | None = None,
) -> ResourceObject:
    """Parse a single-resource document.

    ``method`` is the HTTP method the document was sent with (or, for a
    response, the method of the request that produced it); it decides whether
    an empty ``id`` is allowed.
    """
    try:
        document = _load_document(headers, body, settings)
        resource = _parse_resource(document["data"], method=method)
    except JSONAPIError as exc:
        logger.debug("Rejected JSON:API document at %r: %s", exc.pointer, exc.detail)
        raise
    logger.debug("Parsed JSON:API resource %s/%s", resource.type, resource.id)
    return resource


def parse_many(
    headers: Headers,
    body: Body,
    *,
    method: str = "GET",
    settings: ClientSettings | None = None,
) -> list[ResourceObject]:
    """Parse a list document; the first invalid element fails the whole parse."""
    try:
        document = _load_document(headers, body, settings)
        data = document["data"]
        if not isinstance(data, list):
            raise SpecificationError(
                "Primary data must be an array of resource objects.", pointer="/data"
            )
        resources = [_parse_resource(item, method=method) for item in data]
    except JSONAPIError as exc:
        logger.debug("Rejected JSON:API document at %r: %s", exc.pointer, exc.detail)
        raise
    logger.debug("Parsed JSON:API list of %d resources", len(resources))
    return resources


def parse_object(
    request: httpx.Request, *, settings: ClientSettings | None = None
) -> ResourceObject:
    """Parse the single-resource document carried by ``request``."""
    return parse_single(
        request.headers, request.read(), method=request.method, settings=settings
    )


def parse_list(
    request: httpx.Request, *, settings: ClientSettings | None = None
) -> list[ResourceObject]:
    """Parse the list document carried by ``request``."""
    return parse_many(
        request.headers, request.read(), method=request.method, settings=settings
    )
