from fastapi.testclient import TestClient
from starlette.responses import Response
from promptswap.main import app
from promptswap.api.deps import get_swap_action_handler
from promptswap.errors import BusinessError, ErrorCodes
from promptswap.models.enums import SwapAction


def test_cancel_forwards_id_and_action(client: TestClient, swap_handler):
    r = client.post("/api/swaps/42/cancel")
    assert r.status_code == 200, r.text
    assert len(swap_handler.calls) == 1
    request, swap_id, action = swap_handler.calls[0]
    assert swap_id == "42"
    assert action == "cancel"
    assert action is SwapAction.CANCEL
    assert request.method == "POST"
    assert request.url.path == "/api/swaps/42/cancel"


def test_accept_forwards_accept_action(client: TestClient, swap_handler):
    r = client.post("/api/swaps/swap-abc/accept")
    assert r.status_code == 200
    _, swap_id, action = swap_handler.calls[0]
    assert swap_id == "swap-abc"
    assert action == SwapAction.ACCEPT


def test_cancel_returns_handler_response_verbatim(client: TestClient, swap_handler):
    body = b"\x00\x01opaque handler payload\xff"
    swap_handler.response_factory = lambda swap_id, action: Response(
        content=body,
        status_code=202,
        media_type="application/octet-stream",
        headers={"x-handler": "yes"},
    )
    r = client.post("/api/swaps/42/cancel")
    assert r.status_code == 202
    assert r.content == body
    assert r.headers["content-type"] == "application/octet-stream"
    assert r.headers["x-handler"] == "yes"


def test_cancel_passes_through_handler_error_responses(client: TestClient, swap_handler):
    from starlette.responses import JSONResponse
    swap_handler.response_factory = lambda swap_id, action: JSONResponse(
        {"ok": False, "error": {"code": "FORBIDDEN", "message": "Only requester may perform this action"}},
        status_code=403,
    )
    r = client.post("/api/swaps/42/cancel")
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "FORBIDDEN"


def test_cancel_response_carries_request_id(client: TestClient, swap_handler):
    r = client.post("/api/swaps/42/cancel", headers={"x-request-id": "trace-42"})
    assert r.headers["x-request-id"] == "trace-42"
    request, _, _ = swap_handler.calls[0]
    assert request.state.request_id == "trace-42"


def test_cancel_does_not_read_body(client: TestClient, swap_handler):
    r = client.post("/api/swaps/42/cancel", content=b"not json at all", headers={"content-type": "application/json"})
    assert r.status_code == 200
    assert swap_handler.calls[0][1] == "42"


def test_handler_exceptions_propagate_to_global_handlers(client: TestClient):
    async def failing_handler(request, swap_id, action):
        raise BusinessError("INVALID_TRANSITION", f"Cannot {action.value} from status declined", {"from": "declined"})

    app.dependency_overrides[get_swap_action_handler] = lambda: failing_handler
    try:
        r = client.post("/api/swaps/7/cancel", headers={"x-request-id": "err-1"})
    finally:
        del app.dependency_overrides[get_swap_action_handler]
    assert r.status_code == 409
    body = r.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "INVALID_TRANSITION"
    assert body["error"]["details"] == {"from": "declined"}
    assert body["request_id"] == "err-1"


def test_unexpected_handler_exception_becomes_500():
    async def broken_handler(request, swap_id, action):
        raise RuntimeError("database exploded")

    app.dependency_overrides[get_swap_action_handler] = lambda: broken_handler
    try:
        client = TestClient(app, raise_server_exceptions=False)
        r = client.post("/api/swaps/7/cancel", headers={"x-request-id": "boom-1"})
    finally:
        del app.dependency_overrides[get_swap_action_handler]
    assert r.status_code == 500
    body = r.json()
    assert body["error"]["code"] == ErrorCodes.INTERNAL_ERROR
    assert body["request_id"] == "boom-1"
    assert "database exploded" not in r.text


def test_cancel_without_registered_handler_is_unavailable(client: TestClient):
    r = client.post("/api/swaps/42/cancel")
    assert r.status_code == 503
    body = r.json()
    assert body["error"]["code"] == ErrorCodes.SWAP_ACTIONS_UNAVAILABLE
    assert r.headers["x-request-id"] == body["request_id"]


def test_cancel_requires_post(client: TestClient, swap_handler):
    r = client.get("/api/swaps/42/cancel")
    assert r.status_code == 405
    assert swap_handler.calls == []
