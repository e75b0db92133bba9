"""JSON:API error objects and the typed client error hierarchy."""

from __future__ import annotations

from enum import Enum
from typing import Any

import httpx


class JSONAPIErrorBuilder:
    """Build JSON:API error objects and error documents."""

    def error_object(
        self,
        *,
        status: str | None = None,
        code: str | None = None,
        title: str | None = None,
        detail: str | None = None,
        source: dict[str, Any] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API error object."""
        error: dict[str, Any] = {}
        if status is not None:
            error["status"] = status
        if code is not None:
            error["code"] = code
        if title is not None:
            error["title"] = title
        if detail is not None:
            error["detail"] = detail
        if source is not None:
            error["source"] = source
        if meta is not None:
            error["meta"] = meta
        if not error:
            raise ValueError("Error object must include at least one field.")
        return error

    def error_document(self, errors: list[dict[str, Any]]) -> dict[str, Any]:
        """Return a JSON:API document with an errors array."""
        return {"errors": errors}


class ErrorKind(str, Enum):
    """Stable discriminant for telling error classes apart."""

    SPECIFICATION = "specification"
    HEADER_NEGOTIATION = "header_negotiation"
    INTERNAL = "internal"
    REQUEST = "request"


class JSONAPIError(Exception):
    """Base class for every failure raised while parsing or building documents.

    Carries an HTTP status appropriate to the failure, a human readable
    title/detail pair and an optional JSON pointer into the offending document.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    status: int = httpx.codes.INTERNAL_SERVER_ERROR
    title: str = "Internal Server Error"

    def __init__(
        self,
        detail: str,
        *,
        pointer: str | None = None,
        status: int | None = None,
        title: str | None = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.pointer = pointer
        if status is not None:
            self.status = status
        if title is not None:
            self.title = title

    @property
    def source(self) -> dict[str, str] | None:
        """Return the JSON:API ``source`` member, if a pointer is known."""
        if self.pointer is None:
            return None
        return {"pointer": self.pointer}

    def to_error_object(self) -> dict[str, Any]:
        """Render this error as a JSON:API error object."""
        return JSONAPIErrorBuilder().error_object(
            status=str(int(self.status)),
            code=self.kind.value,
            title=self.title,
            detail=self.detail,
            source=self.source,
        )

    def to_document(self) -> dict[str, Any]:
        """Render this error as a JSON:API error document."""
        builder = JSONAPIErrorBuilder()
        return builder.error_document([self.to_error_object()])

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={int(self.status)}, "
            f"pointer={self.pointer!r}, detail={self.detail!r})"
        )


class SpecificationError(JSONAPIError):
    """The document is valid JSON but breaks a JSON:API structural rule."""

    kind = ErrorKind.SPECIFICATION
    status = httpx.codes.UNPROCESSABLE_ENTITY
    title = "JSON:API Specification Error"


class HeaderNegotiationError(JSONAPIError):
    """The Content-Type header does not carry the JSON:API media type."""

    kind = ErrorKind.HEADER_NEGOTIATION
    status = httpx.codes.NOT_ACCEPTABLE
    title = "Not Acceptable"


class InternalError(JSONAPIError):
    """Wraps decode or I/O failures that are not a specification problem."""

    kind = ErrorKind.INTERNAL
    status = httpx.codes.INTERNAL_SERVER_ERROR
    title = "Internal Server Error"


class RequestError(JSONAPIError):
    """A request could not be constructed from the given arguments."""

    kind = ErrorKind.REQUEST
    status = httpx.codes.BAD_REQUEST
    title = "Bad Request"
