"""JSON:API v1.1 client-side document model, parser and request builder."""

from .client import ClientResponse, JSONAPIRequest, build_get_request, build_request
from .config import ClientSettings, get_settings
from .core.document import JSONAPIDocumentBuilder
from .core.errors import (
    ErrorKind,
    HeaderNegotiationError,
    InternalError,
    JSONAPIError,
    JSONAPIErrorBuilder,
    RequestError,
    SpecificationError,
)
from .core.parser import (
    parse_list,
    parse_many,
    parse_object,
    parse_single,
    validate_resource,
)
from .schemas import (
    LinkageShape,
    Relationship,
    ResourceIdentifier,
    ResourceLinkage,
    ResourceObject,
)
from .utils import validate_headers

__all__ = [
    "ClientResponse",
    "ClientSettings",
    "ErrorKind",
    "HeaderNegotiationError",
    "InternalError",
    "JSONAPIDocumentBuilder",
    "JSONAPIError",
    "JSONAPIErrorBuilder",
    "JSONAPIRequest",
    "LinkageShape",
    "Relationship",
    "RequestError",
    "ResourceIdentifier",
    "ResourceLinkage",
    "ResourceObject",
    "SpecificationError",
    "build_get_request",
    "build_request",
    "get_settings",
    "parse_list",
    "parse_many",
    "parse_object",
    "parse_single",
    "validate_headers",
    "validate_resource",
]
