"""Build JSON:API conformant outbound requests."""

from __future__ import annotations

import logging

import httpx

from fastjsonapi_client.client.response import ClientResponse
from fastjsonapi_client.config import ClientSettings, get_settings
from fastjsonapi_client.core.document import JSONAPIDocumentBuilder
from fastjsonapi_client.core.errors import RequestError, SpecificationError
from fastjsonapi_client.core.parser import validate_resource
from fastjsonapi_client.schemas.resource import ResourceObject
from fastjsonapi_client.utils.paths import resource_path

logger = logging.getLogger(__name__)

BODY_METHODS = frozenset({"PATCH", "POST"})
RESOURCE_METHODS = frozenset({"PATCH", "POST", "DELETE"})


class JSONAPIRequest:
    """An ``httpx.Request`` that knows how to send itself and wrap the reply."""

    def __init__(
        self, request: httpx.Request, *, settings: ClientSettings | None = None
    ) -> None:
        self.request = request
        self.settings = settings or get_settings()

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def url(self) -> httpx.URL:
        return self.request.url

    @property
    def headers(self) -> httpx.Headers:
        return self.request.headers

    @property
    def content(self) -> bytes:
        return self.request.read()

    def send(self, client: httpx.Client | None = None) -> ClientResponse:
        """Send the request, using a short-lived client when none is given."""
        if client is not None:
            return ClientResponse(client.send(self.request), settings=self.settings)
        with httpx.Client(timeout=self.settings.timeout) as owned_client:
            return ClientResponse(owned_client.send(self.request), settings=self.settings)

    async def asend(self, client: httpx.AsyncClient | None = None) -> ClientResponse:
        """Async variant of :meth:`send`."""
        if client is not None:
            response = await client.send(self.request)
            return ClientResponse(response, settings=self.settings)
        async with httpx.AsyncClient(timeout=self.settings.timeout) as owned_client:
            response = await owned_client.send(self.request)
            return ClientResponse(response, settings=self.settings)

    def __repr__(self) -> str:
        return f"<JSONAPIRequest [{self.method} {self.url}]>"


def _parse_base_url(base_url: str) -> httpx.URL:
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise RequestError(f"Invalid base URL '{base_url}': {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise RequestError(
            f"Invalid base URL '{base_url}': an absolute http(s) URL is required."
        )
    return url


def _resource_url(url: httpx.URL, resource_type: str, resource_id: str = "") -> httpx.URL:
    try:
        return url.copy_with(path=resource_path(url.path, resource_type, resource_id))
    except httpx.InvalidURL as exc:
        raise RequestError(
            f"Unable to build a path for resource '{resource_type}': {exc}"
        ) from exc


def build_get_request(
    base_url: str,
    resource_type: str,
    resource_id: str = "",
    *,
    settings: ClientSettings | None = None,
) -> JSONAPIRequest:
    """Build a ``GET /<type>s(/<id>)`` request.

    Pass an empty ``resource_id`` to fetch the whole collection::

        request = build_get_request("http://apiserver", "user")
        response = request.send()  # GET http://apiserver/users

        request = build_get_request("http://apiserver", "user", "2")
        response = request.send()  # GET http://apiserver/users/2
    """
    settings = settings or get_settings()
    url = _parse_base_url(base_url)
    if not resource_type:
        raise RequestError("A resource type is required to build a GET request.")

    request = httpx.Request(
        "GET",
        _resource_url(url, resource_type, resource_id),
        headers={"Accept": settings.media_type},
    )
    logger.debug("Built JSON:API request %s %s", request.method, request.url)
    return JSONAPIRequest(request, settings=settings)


def build_request(
    method: str,
    base_url: str,
    resource: ResourceObject | None,
    *,
    settings: ClientSettings | None = None,
) -> JSONAPIRequest:
    """Build a PATCH, POST or DELETE request for ``resource``.

    GET requests go through :func:`build_get_request`. PATCH and DELETE need a
    resource with both type and id; POST may leave the id empty so the server
    assigns one::

        resource = ResourceObject.new("user", "", {"name": "Ada"})
        request = build_request("POST", "http://apiserver", resource)
        response = request.send()  # POST http://apiserver/users
    """
    settings = settings or get_settings()
    url = _parse_base_url(base_url)

    method = method.upper()
    if method == "GET":
        raise SpecificationError(
            "Use build_get_request() for 'GET' method HTTP requests."
        )
    if method not in RESOURCE_METHODS:
        raise SpecificationError(
            f"Cannot use HTTP method '{method}' for a JSON:API request."
        )
    if resource is None:
        raise SpecificationError(
            f"Resource object must be present for HTTP method '{method}'."
        )
    validate_resource(resource, method=method)

    content = b""
    if method in BODY_METHODS:
        builder = JSONAPIDocumentBuilder()
        content = builder.render(
            builder.build_single(resource), indent=settings.json_indent
        )

    request = httpx.Request(
        method,
        _resource_url(url, resource.type, resource.id),
        headers={
            "Accept": settings.media_type,
            "Content-Type": settings.media_type,
            "Content-Length": str(len(content)),
        },
        content=content,
    )
    logger.debug("Built JSON:API request %s %s", request.method, request.url)
    return JSONAPIRequest(request, settings=settings)
