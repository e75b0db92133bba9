"""Core JSON:API document and error helpers."""

from .document import JSONAPIDocumentBuilder
from .errors import (
    ErrorKind,
    HeaderNegotiationError,
    InternalError,
    JSONAPIError,
    JSONAPIErrorBuilder,
    RequestError,
    SpecificationError,
)

__all__ = [
    "ErrorKind",
    "HeaderNegotiationError",
    "InternalError",
    "JSONAPIDocumentBuilder",
    "JSONAPIError",
    "JSONAPIErrorBuilder",
    "RequestError",
    "SpecificationError",
]
