"""Outbound request construction and response parsing."""

from .request import JSONAPIRequest, build_get_request, build_request
from .response import ClientResponse

__all__ = ["ClientResponse", "JSONAPIRequest", "build_get_request", "build_request"]
