import io
import json

import httpx
import pytest

from fastjsonapi_client.core.document import JSONAPIDocumentBuilder
from fastjsonapi_client.core.errors import (
    ErrorKind,
    HeaderNegotiationError,
    InternalError,
    SpecificationError,
)
from fastjsonapi_client.core.parser import (
    parse_list,
    parse_many,
    parse_object,
    parse_single,
)
from fastjsonapi_client.schemas.resource import (
    LinkageShape,
    Relationship,
    ResourceIdentifier,
    ResourceLinkage,
    ResourceObject,
)


class TrackingStream(io.BytesIO):
    """BytesIO that remembers whether it was closed."""

    was_closed = False

    def close(self):
        self.was_closed = True
        super().close()


def test_parse_single_valid_object(jsonapi_headers, user_document):
    resource = parse_single(jsonapi_headers, user_document)

    assert resource.type == "user"
    assert resource.id == "sweetID123"
    assert resource.attributes == b'{"ID":"123"}'
    assert resource.relationships["company"] == Relationship(
        data=ResourceLinkage.to_one(ResourceIdentifier(type="company", id="companyID123"))
    )
    assert resource.relationships["comments"] == Relationship.to_many(
        [("comments", "commentID123"), ("comments", "commentID456")]
    )


def test_parse_single_missing_type(jsonapi_headers):
    body = b'{"data": {"id": "sweetID123", "attributes": {"ID":"123"}}}'

    with pytest.raises(SpecificationError) as exc_info:
        parse_single(jsonapi_headers, body)

    assert exc_info.value.status == 422
    assert exc_info.value.pointer == "/data/attributes/type"


@pytest.mark.parametrize("body", [
    b'{"data": {"type": "test", "attributes": {"ID":"123"}}}',
    b'{"data": {"id": "", "type": "test", "attributes": {"ID":"123"}}}',
])
def test_empty_id_is_only_accepted_for_post(jsonapi_headers, body):
    resource = parse_single(jsonapi_headers, body, method="POST")
    assert resource.id == ""

    for method in ("PATCH", "GET", "DELETE"):
        with pytest.raises(SpecificationError) as exc_info:
            parse_single(jsonapi_headers, body, method=method)
        assert exc_info.value.status == 422
        assert exc_info.value.pointer == "/data/attributes/id"


def test_parse_single_rejects_non_string_id(jsonapi_headers):
    body = b'{"data": {"type": "user", "id": 12}}'

    with pytest.raises(SpecificationError) as exc_info:
        parse_single(jsonapi_headers, body)

    assert exc_info.value.pointer == "/data/attributes/id"


def test_parse_single_rejects_bad_content_type(user_document):
    with pytest.raises(HeaderNegotiationError) as exc_info:
        parse_single({"Content-Type": "application/json"}, user_document)

    assert exc_info.value.status == 406


def test_parse_single_rejects_array_data(jsonapi_headers):
    body = b'{"data": [{"type": "user", "id": "1"}]}'

    with pytest.raises(SpecificationError) as exc_info:
        parse_single(jsonapi_headers, body)

    assert exc_info.value.pointer == "/data"


def test_parse_single_rejects_missing_data(jsonapi_headers):
    with pytest.raises(SpecificationError) as exc_info:
        parse_single(jsonapi_headers, b'{"meta": {}}')

    assert exc_info.value.pointer == "/data"


def test_invalid_json_is_an_internal_error(jsonapi_headers):
    with pytest.raises(InternalError) as exc_info:
        parse_single(jsonapi_headers, b"{not json")

    assert exc_info.value.status == 500
    assert exc_info.value.kind is ErrorKind.INTERNAL
    assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)


@pytest.mark.parametrize("literal", [b"NaN", b"Infinity", b"-Infinity"])
def test_non_standard_constants_are_rejected(jsonapi_headers, literal):
    body = b'{"data": {"type": "user", "id": "1", "attributes": {"score": ' + literal + b"}}}"

    with pytest.raises(InternalError) as exc_info:
        parse_single(jsonapi_headers, body)

    assert exc_info.value.status == 500


def test_out_of_range_number_in_attributes(jsonapi_headers):
    body = b'{"data": {"type": "user", "id": "1", "attributes": {"score": 1e400}}}'

    with pytest.raises(InternalError) as exc_info:
        parse_single(jsonapi_headers, body)

    assert exc_info.value.pointer == "/data/attributes"


def test_lone_surrogate_in_attributes(jsonapi_headers):
    body = b'{"data": {"type": "user", "id": "1", "attributes": {"name": "\\ud800"}}}'

    with pytest.raises(InternalError) as exc_info:
        parse_single(jsonapi_headers, body)

    assert exc_info.value.pointer == "/data/attributes"
    assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)


def test_relationship_identifier_missing_id(jsonapi_headers):
    body = json.dumps({
        "data": {
            "type": "user",
            "id": "1",
            "relationships": {"comments": {"data": [{"type": "comments", "id": "1"}, {"type": "comments"}]}},
        }
    })

    with pytest.raises(SpecificationError) as exc_info:
        parse_single(jsonapi_headers, body)

    assert exc_info.value.pointer == "/data/relationships/comments/data/1/id"


def test_relationship_without_data_member(jsonapi_headers):
    body = json.dumps({
        "data": {"type": "user", "id": "1", "relationships": {"company": {"links": {}}}}
    })

    with pytest.raises(SpecificationError) as exc_info:
        parse_single(jsonapi_headers, body)

    assert exc_info.value.pointer == "/data/relationships/company"


def test_relationships_must_be_an_object(jsonapi_headers):
    body = json.dumps({"data": {"type": "user", "id": "1", "relationships": []}})

    with pytest.raises(SpecificationError) as exc_info:
        parse_single(jsonapi_headers, body)

    assert exc_info.value.pointer == "/data/relationships"


def test_null_linkage_is_an_empty_to_one(jsonapi_headers):
    body = json.dumps({
        "data": {"type": "user", "id": "1", "relationships": {"company": {"data": None}}}
    })

    resource = parse_single(jsonapi_headers, body)

    linkage = resource.relationships["company"].data
    assert linkage.shape is LinkageShape.TO_ONE
    assert len(linkage) == 0


def test_absent_and_empty_relationships_are_kept_apart(jsonapi_headers):
    absent = parse_single(jsonapi_headers, b'{"data": {"type": "user", "id": "1"}}')
    empty = parse_single(
        jsonapi_headers, b'{"data": {"type": "user", "id": "1", "relationships": {}}}'
    )

    assert absent.relationships is None
    assert empty.relationships == {}


def test_parse_many_valid_list(jsonapi_headers):
    body = b"""{"data": [
        {"type": "user", "id": "sweetID123", "attributes": {"ID":"123"}},
        {"type": "user", "id": "sweetID456", "attributes": {"ID":"456"}}
    ]}"""

    resources = parse_many(jsonapi_headers, body)

    assert len(resources) == 2
    assert resources[1].type == "user"
    assert resources[1].id == "sweetID456"
    assert resources[1].attributes == b'{"ID":"456"}'


def test_parse_many_fails_on_first_invalid_element(jsonapi_headers):
    body = b"""{"data": [
        {"type": "user", "id": "sweetID123", "attributes": {"ID":"123"}},
        {"type": "user", "attributes": {"ID":"456"}}
    ]}"""

    with pytest.raises(SpecificationError) as exc_info:
        parse_many(jsonapi_headers, body)

    assert exc_info.value.status == 422
    assert exc_info.value.pointer == "/data/attributes/id"


def test_parse_many_rejects_single_object(jsonapi_headers):
    with pytest.raises(SpecificationError) as exc_info:
        parse_many(jsonapi_headers, b'{"data": {"type": "user", "id": "1"}}')

    assert exc_info.value.pointer == "/data"


def test_parse_many_empty_list(jsonapi_headers):
    assert parse_many(jsonapi_headers, b'{"data": []}') == []


def test_stream_body_is_closed_after_parse(jsonapi_headers, user_document):
    stream = TrackingStream(user_document)

    parse_single(jsonapi_headers, stream)

    assert stream.was_closed


def test_stream_body_is_closed_on_header_failure(user_document):
    stream = TrackingStream(user_document)

    with pytest.raises(HeaderNegotiationError):
        parse_single({"Content-Type": "text/plain"}, stream)

    assert stream.was_closed


def test_stream_body_is_closed_on_validation_failure(jsonapi_headers):
    stream = TrackingStream(b'{"data": {"id": "1"}}')

    with pytest.raises(SpecificationError):
        parse_single(jsonapi_headers, stream)

    assert stream.was_closed


def test_chunked_body(jsonapi_headers):
    chunks = iter([b'{"data": {"type": "user",', b' "id": "1"}}'])

    assert parse_single(jsonapi_headers, chunks).id == "1"


def test_round_trip_keeps_linkage_shape(jsonapi_headers):
    resource = ResourceObject.new(
        "user",
        "1",
        {"name": "Ada", "tags": ["a", "b"]},
        relationships={
            "company": Relationship.to_one("company", "c1"),
            "comments": Relationship.to_many([("comments", "9")]),
            "manager": Relationship(data=ResourceLinkage.to_one()),
        },
    )
    builder = JSONAPIDocumentBuilder()
    body = builder.render(builder.build_single(resource))

    assert parse_single(jsonapi_headers, body) == resource


def test_parse_object_uses_request_method():
    body = b'{"data": {"type": "test", "attributes": {"ID":"123"}}}'
    headers = {"Content-Type": "application/vnd.api+json"}

    created = parse_object(httpx.Request("POST", "http://api/tests", headers=headers, content=body))
    assert created.id == ""

    with pytest.raises(SpecificationError):
        parse_object(httpx.Request("PATCH", "http://api/tests", headers=headers, content=body))


def test_parse_list_from_request():
    body = b'{"data": [{"type": "test", "id": "1"}, {"type": "test", "id": "2"}]}'
    request = httpx.Request(
        "GET",
        "http://api/tests",
        headers={"Content-Type": "application/vnd.api+json"},
        content=body,
    )

    assert [resource.id for resource in parse_list(request)] == ["1", "2"]
