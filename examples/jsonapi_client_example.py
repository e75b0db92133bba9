"""Example client talking to a JSON:API server.

Run against any JSON:API server exposing ``/articles`` and ``/users``:
    JSONAPI_BASE_URL=http://localhost:8000 python examples/jsonapi_client_example.py
"""
from __future__ import annotations

import logging
import os

import httpx
from pydantic import BaseModel

from fastjsonapi_client import (
    JSONAPIError,
    Relationship,
    ResourceObject,
    build_get_request,
    build_request,
    get_settings,
)

BASE_URL = os.environ.get("JSONAPI_BASE_URL", "http://localhost:8000")

logger = logging.getLogger(__name__)


class Article(BaseModel):
    title: str
    body: str


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    settings = get_settings()

    with httpx.Client(timeout=settings.timeout) as client:
        articles = build_get_request(BASE_URL, "article").send(client).get_list()
        for article in articles:
            logger.info("article %s: %s", article.id, article.unmarshal(Article).title)

        draft = ResourceObject.new(
            "article",
            "",
            Article(title="JSON:API clients", body="Parsing documents strictly."),
            relationships={"author": Relationship.to_one("user", "1")},
        )
        try:
            created = build_request("POST", BASE_URL, draft).send(client).get_object()
        except JSONAPIError as exc:
            logger.error("server rejected article: %s", exc.to_document())
            return

        logger.info("created article %s", created.id)
        build_request("DELETE", BASE_URL, created).send(client)


if __name__ == "__main__":
    main()
