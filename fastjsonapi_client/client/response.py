"""Parse JSON:API documents out of received responses."""

from __future__ import annotations

import httpx

from fastjsonapi_client.config import ClientSettings, get_settings
from fastjsonapi_client.core.errors import InternalError
from fastjsonapi_client.core.parser import parse_many, parse_single
from fastjsonapi_client.schemas.resource import ResourceObject


class ClientResponse:
    """Wrapper around an ``httpx.Response`` exposing the parsed document."""

    def __init__(
        self, response: httpx.Response, *, settings: ClientSettings | None = None
    ) -> None:
        self.response = response
        self.settings = settings or get_settings()

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers

    @property
    def request_method(self) -> str:
        """Method of the request that produced this response."""
        try:
            return self.response.request.method
        except RuntimeError:
            return "GET"

    def _read(self) -> bytes:
        try:
            return self.response.read()
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise InternalError(f"Unable to read response body: {exc}") from exc
        finally:
            if not self.response.is_closed:
                self.response.close()

    def get_object(self) -> ResourceObject:
        """Validate the response and parse its single-resource document."""
        return parse_single(
            self.headers,
            self._read(),
            method=self.request_method,
            settings=self.settings,
        )

    def get_list(self) -> list[ResourceObject]:
        """Validate the response and parse its list document."""
        return parse_many(
            self.headers,
            self._read(),
            method=self.request_method,
            settings=self.settings,
        )

    def __repr__(self) -> str:
        return f"<ClientResponse [{self.status_code}]>"
