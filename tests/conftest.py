import json

import pytest

from fastjsonapi_client.config import ClientSettings

MEDIA_TYPE = "application/vnd.api+json"


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings()


@pytest.fixture
def jsonapi_headers() -> dict[str, str]:
    return {"Content-Type": MEDIA_TYPE}


@pytest.fixture
def user_document() -> bytes:
    return json.dumps(
        {
            "data": {
                "type": "user",
                "id": "sweetID123",
                "attributes": {"ID": "123"},
                "relationships": {
                    "company": {
                        "data": {"type": "company", "id": "companyID123"},
                    },
                    "comments": {
                        "data": [
                            {"type": "comments", "id": "commentID123"},
                            {"type": "comments", "id": "commentID456"},
                        ]
                    },
                },
            }
        }
    ).encode("utf-8")
