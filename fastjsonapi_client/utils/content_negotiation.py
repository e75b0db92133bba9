"""Helpers for JSON:API content negotiation."""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from fastjsonapi_client.config import ClientSettings, get_settings
from fastjsonapi_client.core.errors import HeaderNegotiationError


def _split_parameters(value: str) -> list[str]:
    return [part.strip() for part in value.split(";") if part.strip()]


def _parse_param_value(value: str) -> list[str]:
    if value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    if not value:
        return []
    return value.split(" ")


def parse_jsonapi_media_type(content_type: str) -> dict[str, Any]:
    """Parse JSON:API media type parameters (ext/profile)."""
    parts = _split_parameters(content_type)
    media_type = parts[0].lower() if parts else ""
    params: dict[str, Any] = {"media_type": media_type, "ext": [], "profile": []}

    for param in parts[1:]:
        if "=" not in param:
            params.setdefault("other_params", {})[param.lower()] = ""
            continue
        name, raw_value = param.split("=", 1)
        name = name.strip().lower()
        raw_value = raw_value.strip()
        if name in {"ext", "profile"}:
            params[name] = _parse_param_value(raw_value)
        else:
            params.setdefault("other_params", {})[name] = raw_value
    return params


def validate_headers(
    headers: Mapping[str, str] | httpx.Headers,
    *,
    settings: ClientSettings | None = None,
) -> None:
    """Ensure the Content-Type header carries the JSON:API media type.

    The JSON:API spec forbids media type parameters, but a ``charset``
    parameter is tolerated when ``settings.tolerate_charset`` is set because
    older browsers append one unconditionally. Nothing else is let through.
    The media type itself is compared case-insensitively, as RFC 9110 defines
    type and subtype names to be.
    """
    settings = settings or get_settings()
    content_type = httpx.Headers(headers).get("content-type", "")
    if not content_type.strip():
        raise HeaderNegotiationError(
            f"Missing Content-Type header, expected '{settings.media_type}'."
        )

    parsed = parse_jsonapi_media_type(content_type)
    if parsed["media_type"] != settings.media_type.lower():
        raise HeaderNegotiationError(
            f"Invalid Content-Type header '{content_type}', "
            f"expected '{settings.media_type}'."
        )

    other_params = dict(parsed.get("other_params", {}))
    if settings.tolerate_charset:
        other_params.pop("charset", None)
    if parsed["ext"] or parsed["profile"] or other_params:
        raise HeaderNegotiationError(
            f"Media type parameters are not allowed in Content-Type header "
            f"'{content_type}'."
        )
