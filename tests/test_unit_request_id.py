import re
import pytest
from starlette.requests import Request
from starlette.responses import Response
from promptswap.utils.request_id import REQUEST_ID_HEADER, get_request_id, with_request_id_header

UUID4_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


def _request(headers: dict[str, str] | None = None) -> Request:
    raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw, "query_string": b""})


@pytest.mark.parametrize("value", ["abc-123", "req-1", "0f8fad5b-d9cb-469f-a165-70867728950e", "a b"])
def test_header_value_returned(value):
    assert get_request_id(_request({REQUEST_ID_HEADER: value})) == value


def test_header_value_trimmed():
    assert get_request_id(_request({"x-request-id": "  req-1  "})) == "req-1"
    assert get_request_id(_request({"x-request-id": "\treq-2\t"})) == "req-2"


def test_header_lookup_is_case_insensitive():
    assert get_request_id(_request({"X-Request-ID": "Upper-Case"})) == "Upper-Case"


@pytest.mark.parametrize("headers", [None, {"x-request-id": ""}, {"x-request-id": "   "}, {"x-request-id": "\t"}])
def test_missing_or_blank_header_generates_uuid(headers):
    generated = get_request_id(_request(headers))
    assert len(generated) == 36
    assert UUID4_RE.match(generated)


def test_generated_ids_are_unique():
    request = _request()
    first = get_request_id(request)
    second = get_request_id(request)
    assert first != second


def test_request_headers_untouched():
    request = _request({"x-request-id": "  padded  "})
    get_request_id(request)
    assert request.headers["x-request-id"] == "  padded  "


def test_with_request_id_header_sets_and_returns_same_instance():
    response = Response(content=b"ok")
    returned = with_request_id_header(response, "abc-123")
    assert returned is response
    assert response.headers.get("x-request-id") == "abc-123"


def test_with_request_id_header_replaces_existing_value():
    response = Response(content=b"ok", headers={"x-request-id": "old"})
    with_request_id_header(response, "new")
    assert response.headers.getlist("x-request-id") == ["new"]


def test_with_request_id_header_does_not_validate_format():
    response = with_request_id_header(Response(), "not a uuid!")
    assert response.headers["x-request-id"] == "not a uuid!"
