"""Utility helpers for JSON:API headers and paths."""

from .content_negotiation import parse_jsonapi_media_type, validate_headers
from .paths import collection_name, resource_path

__all__ = [
    "collection_name",
    "parse_jsonapi_media_type",
    "resource_path",
    "validate_headers",
]
