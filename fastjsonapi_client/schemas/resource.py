"""Pydantic models for JSON:API resource objects, identifiers and linkage."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, TypeVar, Union

from fastapi.encoders import jsonable_encoder
from pydantic import (
    BaseModel,
    ConfigDict,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from fastjsonapi_client.core.errors import InternalError

T = TypeVar("T")

IdentifierLike = Union["ResourceIdentifier", Tuple[str, str]]


def reject_constant(name: str) -> Any:
    """Refuse the non-standard ``NaN``/``Infinity`` literals ``json`` accepts."""
    raise ValueError(f"Non-standard JSON constant '{name}' is not allowed.")


def compact_json(value: Any) -> bytes:
    """Return ``value`` as compact UTF-8 JSON, keeping member order.

    Raises ``ValueError`` for values with no JSON form (out of range floats,
    lone surrogates).
    """
    text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    return text.encode("utf-8")


def encode_attributes(value: Any) -> bytes | None:
    """Return attributes as compact raw JSON bytes.

    Raw ``bytes``/``str`` payloads are re-encoded so two payloads that differ
    only in whitespace compare equal; anything else goes through
    ``jsonable_encoder`` first.
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, str)):
        decoded = json.loads(value, parse_constant=reject_constant)
    else:
        decoded = jsonable_encoder(value)
    return compact_json(decoded)


class ResourceIdentifier(BaseModel):
    """Resource identifier object: type + id."""

    model_config = ConfigDict(frozen=True)

    type: str
    id: str

    def to_wire(self) -> dict[str, str]:
        """Return the identifier as a JSON-ready dict."""
        return {"type": self.type, "id": self.id}


def _as_identifier(value: IdentifierLike) -> ResourceIdentifier:
    if isinstance(value, ResourceIdentifier):
        return value
    resource_type, resource_id = value
    return ResourceIdentifier(type=resource_type, id=resource_id)


class LinkageShape(str, Enum):
    """How a linkage is rendered: a single object or an array."""

    TO_ONE = "to-one"
    TO_MANY = "to-many"


class ResourceLinkage(BaseModel):
    """Ordered resource identifiers plus the shape they are rendered in.

    The shape is picked when the linkage is built and never inferred from
    the number of identifiers, so a to-many linkage holding a single
    identifier still renders as a one element array.
    """

    model_config = ConfigDict(frozen=True)

    identifiers: Tuple[ResourceIdentifier, ...] = ()
    shape: LinkageShape = LinkageShape.TO_MANY

    @model_validator(mode="after")
    def _check_to_one_size(self) -> "ResourceLinkage":
        if self.shape is LinkageShape.TO_ONE and len(self.identifiers) > 1:
            raise ValueError("A to-one linkage holds at most one resource identifier.")
        return self

    @classmethod
    def to_one(cls, identifier: IdentifierLike | None = None) -> "ResourceLinkage":
        """Return a to-one linkage, empty when ``identifier`` is None."""
        identifiers = () if identifier is None else (_as_identifier(identifier),)
        return cls(identifiers=identifiers, shape=LinkageShape.TO_ONE)

    @classmethod
    def to_many(cls, identifiers: Iterable[IdentifierLike] = ()) -> "ResourceLinkage":
        """Return a to-many linkage over ``identifiers``."""
        return cls(
            identifiers=tuple(_as_identifier(item) for item in identifiers),
            shape=LinkageShape.TO_MANY,
        )

    @property
    def is_to_one(self) -> bool:
        return self.shape is LinkageShape.TO_ONE

    def __len__(self) -> int:
        return len(self.identifiers)

    def __iter__(self) -> Iterator[ResourceIdentifier]:  # type: ignore[override]
        return iter(self.identifiers)

    def __getitem__(self, index: int) -> ResourceIdentifier:
        return self.identifiers[index]

    def to_wire(self) -> Any:
        """Return ``{...}``/``None`` for to-one linkage and ``[...]`` for to-many."""
        if self.shape is LinkageShape.TO_ONE:
            return self.identifiers[0].to_wire() if self.identifiers else None
        return [identifier.to_wire() for identifier in self.identifiers]


class Relationship(BaseModel):
    """Relationship object carrying resource linkage."""

    model_config = ConfigDict(frozen=True)

    data: ResourceLinkage

    @classmethod
    def to_one(cls, resource_type: str, resource_id: str) -> "Relationship":
        """Return a to-one relationship pointing at a single resource."""
        return cls(data=ResourceLinkage.to_one((resource_type, resource_id)))

    @classmethod
    def to_many(cls, identifiers: Iterable[IdentifierLike] = ()) -> "Relationship":
        """Return a to-many relationship over ``identifiers``."""
        return cls(data=ResourceLinkage.to_many(identifiers))

    def to_wire(self) -> dict[str, Any]:
        """Return the relationship as a JSON-ready dict."""
        return {"data": self.data.to_wire()}


class ResourceObject(BaseModel):
    """Resource object with type, id, raw attributes and relationships.

    ``attributes`` holds the wire payload in compact form (member order and
    values kept, insignificant whitespace dropped); callers decode it into
    their own types with :meth:`unmarshal`.
    ``relationships`` is None when the document has no relationships member
    and an empty dict when the member is present but empty.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    id: str = ""
    attributes: Optional[bytes] = None
    relationships: Optional[Dict[str, Relationship]] = None

    @field_validator("attributes", mode="before")
    @classmethod
    def _encode_attributes(cls, value: Any) -> bytes | None:
        return encode_attributes(value)

    @classmethod
    def new(
        cls,
        resource_type: str,
        resource_id: str = "",
        attributes: Any = None,
        *,
        relationships: dict[str, Relationship] | None = None,
    ) -> "ResourceObject":
        """Build a resource from any JSON-able attribute payload.

        Pass an empty ``resource_id`` for resources the server will assign an
        id to on creation. Attributes that cannot be encoded as JSON raise
        :class:`InternalError`.
        """
        try:
            return cls(
                type=resource_type,
                id=resource_id,
                attributes=attributes,
                relationships=relationships,
            )
        except ValidationError as exc:
            fields = {error["loc"][0] for error in exc.errors() if error["loc"]}
            raise InternalError(
                f"Unable to build resource '{resource_type}': {exc}",
                pointer="/data/attributes" if fields == {"attributes"} else None,
            ) from exc

    def unmarshal(self, target: type[T]) -> T:
        """Decode the raw attributes into ``target`` (a model, dataclass, dict, ...)."""
        if self.attributes is None:
            raise InternalError(
                f"Resource '{self.type}' has no attributes to unmarshal.",
                pointer="/data/attributes",
            )
        try:
            return TypeAdapter(target).validate_json(self.attributes)
        except ValidationError as exc:
            name = getattr(target, "__name__", repr(target))
            raise InternalError(
                f"Unable to unmarshal attributes into {name}: {exc}",
                pointer="/data/attributes",
            ) from exc

    def to_wire(self) -> dict[str, Any]:
        """Return the resource object as a JSON-ready dict."""
        resource: dict[str, Any] = {"type": self.type}
        if self.id:
            resource["id"] = self.id
        if self.attributes is not None:
            resource["attributes"] = json.loads(self.attributes)
        if self.relationships is not None:
            resource["relationships"] = {
                name: relationship.to_wire()
                for name, relationship in self.relationships.items()
            }
        return resource
