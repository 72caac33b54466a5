import base64
import json
from urllib.parse import parse_qs

import httpx
import pytest
from structlog.testing import capture_logs

from application.dtos.payments import Action, StatusResponse, TransportMode
from infrastructure.external.payments.exceptions import (
    APIError,
    DecodeError,
    RedirectError,
    TransportError,
)
from infrastructure.external.payments.liqpay_client import LiqPayClient
from infrastructure.external.payments.signing import sign
from shared.codes.payment_codes import LIQPAY_CHECKOUT_URL, LIQPAY_REQUEST_URL, PaymentCode


def _form(request: httpx.Request) -> dict:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def _json(body, status_code: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)
    return handler


@pytest.mark.asyncio
async def test_redirect_returns_location(make_client):
    client, transport = make_client(lambda r: httpx.Response(302, headers={"Location": "https://pay.example/x"}))
    url = await client.send_redirect({"action": "pay", "amount": 1})
    assert url == "https://pay.example/x"
    req = transport.requests[0]
    assert str(req.url) == LIQPAY_CHECKOUT_URL
    assert req.method == "POST"
    form = _form(req)
    assert set(form) == {"data", "signature"}
    assert form["signature"] == sign("priv_1", form["data"])


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [200, 301, 303, 307])
async def test_redirect_rejects_anything_but_302(make_client, status_code):
    client, _ = make_client(lambda r: httpx.Response(status_code, headers={"Location": "https://pay.example/x"}))
    with pytest.raises(RedirectError) as ei:
        await client.send_redirect({"action": "pay"})
    assert ei.value.message == "redirect not found"
    assert ei.value.status_code == status_code
    assert ei.value.code == PaymentCode.REDIRECT_ERROR


@pytest.mark.asyncio
async def test_redirect_without_location(make_client):
    client, _ = make_client(lambda r: httpx.Response(302))
    with pytest.raises(RedirectError):
        await client.send_redirect({"action": "pay"})


@pytest.mark.asyncio
async def test_shared_client_redirects_are_not_followed_or_mutated():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        if str(request.url) == LIQPAY_CHECKOUT_URL:
            return httpx.Response(302, headers={"Location": "https://pay.example/checkout"})
        return httpx.Response(200, text="followed")

    shared = httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)
    client = LiqPayClient(public_key="pub_1", private_key="priv_1", http_client=shared)
    assert await client.send_redirect({"action": "pay"}) == "https://pay.example/checkout"
    assert seen == [LIQPAY_CHECKOUT_URL]
    assert shared.follow_redirects is True

    await client.aclose()
    assert shared.is_closed is False
    await shared.aclose()


@pytest.mark.asyncio
async def test_owned_client_uses_timeouts_and_is_closed():
    client = LiqPayClient(
        public_key="pub_1",
        private_key="priv_1",
        timeouts={"connect": 2.0, "read": 4.0, "write": 4.0, "total": 6.0},
    )
    http_client = client.client
    assert http_client.follow_redirects is False
    assert http_client.timeout.connect == 2.0
    assert http_client.timeout.read == 4.0
    await client.aclose()
    assert http_client.is_closed is True
    assert client._client is None


@pytest.mark.asyncio
async def test_direct_posts_form_and_returns_generic_map(make_client):
    client, transport = make_client(_json({"status": "success", "order_id": "o1"}))
    result = await client.send_direct({"action": "status", "order_id": "o1"})
    assert result == {"status": "success", "order_id": "o1"}
    req = transport.requests[0]
    assert str(req.url) == LIQPAY_REQUEST_URL
    assert req.headers["content-type"] == "application/x-www-form-urlencoded"
    payload = json.loads(base64.b64decode(_form(req)["data"]))
    assert payload == {"action": "status", "order_id": "o1", "version": "3", "public_key": "pub_1"}


@pytest.mark.asyncio
async def test_direct_decodes_into_typed_record(make_client):
    client, _ = make_client(_json({"status": "success", "payment_id": 7, "unknown": True}))
    result = await client.send_direct({"action": "status"}, StatusResponse)
    assert isinstance(result, StatusResponse)
    assert result.payment_id == 7
    assert result.model_extra == {"unknown": True}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"status": "error", "err_code": "err_auth", "err_description": "Authorization required", "foo": 1},
        {"status": "failure", "err_code": "err_auth", "err_description": "Authorization required"},
        {"result": "error", "status": "error", "err_code": "err_auth", "err_description": "Authorization required"},
    ],
)
async def test_api_error_classification(make_client, body):
    client, _ = make_client(_json(body))
    with pytest.raises(APIError) as ei:
        await client.send_direct({"action": "status"})
    err = ei.value
    assert err.status == body["status"]
    assert err.err_code == "err_auth"
    assert err.err_description == "Authorization required"
    assert err.http_status == 200
    assert err.response is None
    assert err.code == PaymentCode.PROVIDER_ERROR


@pytest.mark.asyncio
async def test_api_error_on_result_only_defaults_missing_fields(make_client):
    client, _ = make_client(_json({"result": "error"}))
    with pytest.raises(APIError) as ei:
        await client.send_direct({"action": "invoice_cancel"})
    assert (ei.value.status, ei.value.err_code, ei.value.err_description) == ("", "", "")


@pytest.mark.asyncio
async def test_api_error_carries_typed_record(make_client):
    body = {"status": "error", "err_code": 9851, "err_description": "expired", "order_id": "o1"}
    client, _ = make_client(_json(body, status_code=400))
    with pytest.raises(APIError) as ei:
        await client.send_direct({"action": "status"}, StatusResponse)
    err = ei.value
    assert isinstance(err.response, StatusResponse)
    assert err.response.order_id == "o1"
    assert err.err_code == "9851"
    assert err.http_status == 400
    assert err.error_info is not None and err.error_info.family == "financial"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>oops</html>"),
        httpx.Response(200, json=[1, 2, 3]),
        httpx.Response(200, json="just a string"),
    ],
)
async def test_direct_decode_errors(make_client, response):
    client, _ = make_client(lambda r: response)
    with pytest.raises(DecodeError) as ei:
        await client.send_direct({"action": "status"})
    assert ei.value.code == PaymentCode.DECODE_ERROR


@pytest.mark.asyncio
async def test_direct_shape_mismatch_is_decode_error(make_client):
    client, _ = make_client(_json({"status": "success", "payment_id": "not-a-number"}))
    with pytest.raises(DecodeError):
        await client.send_direct({"action": "status"}, StatusResponse)


@pytest.mark.asyncio
async def test_timeout_is_transport_error(make_client):
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client, _ = make_client(handler)
    with pytest.raises(TransportError) as ei:
        await client.send_direct({"action": "status"})
    assert ei.value.timeout is True
    assert ei.value.code == PaymentCode.TIMEOUT


@pytest.mark.asyncio
async def test_network_failure_is_transport_error(make_client):
    def handler(request):
        raise httpx.ConnectError("dns failure", request=request)

    client, _ = make_client(handler)
    with pytest.raises(TransportError) as ei:
        await client.send_redirect({"action": "pay"})
    assert ei.value.timeout is False
    assert ei.value.code == PaymentCode.PROVIDER_RECOVERABLE
    assert isinstance(ei.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_execute_tags_action_and_routes_by_mode(make_client):
    def handler(request):
        if str(request.url) == LIQPAY_CHECKOUT_URL:
            return httpx.Response(302, headers={"Location": "https://pay.example/y"})
        return httpx.Response(200, json={"status": "success"})

    client, transport = make_client(handler)
    payload = {"order_id": "o1", "action": "hold"}
    assert await client.execute(Action.PAY, payload, TransportMode.REDIRECT) == "https://pay.example/y"
    assert await client.execute("status", payload, TransportMode.DIRECT) == {"status": "success"}

    sent = [json.loads(base64.b64decode(_form(r)["data"])) for r in transport.requests]
    assert [p["action"] for p in sent] == ["pay", "status"]
    assert list(sent[0]) == ["order_id", "action", "version", "public_key"]
    assert payload == {"order_id": "o1", "action": "hold"}


@pytest.mark.asyncio
async def test_debug_logging_events(make_client):
    body = {"status": "error", "err_code": "err_auth", "err_description": "Authorization required"}
    client, _ = make_client(_json(body, status_code=200), debug=True)
    with capture_logs() as logs:
        with pytest.raises(APIError):
            await client.send_direct({"action": "status"})

    assert [e["event"] for e in logs] == ["liqpay_request", "liqpay_response", "liqpay_api_error"]
    assert all(e["log_level"] == "info" and e["provider"] == "liqpay" for e in logs)
    request_event, response_event, error_event = logs
    assert request_event["method"] == "POST"
    assert request_event["url"] == LIQPAY_REQUEST_URL
    assert request_event["mode"] == "direct"
    assert response_event["body"] == body
    assert {k: error_event[k] for k in ("status", "status_code", "err_code", "err_description")} == {
        "status": "error",
        "status_code": 200,
        "err_code": "err_auth",
        "err_description": "Authorization required",
    }


@pytest.mark.asyncio
async def test_redirect_debug_logging_records_location(make_client):
    client, _ = make_client(lambda r: httpx.Response(302, headers={"Location": "https://pay.example/x"}), debug=True)
    with capture_logs() as logs:
        await client.send_redirect({"action": "pay"})
    assert [e["event"] for e in logs] == ["liqpay_request", "liqpay_response"]
    assert logs[0]["mode"] == "redirect"
    assert logs[1]["location"] == "https://pay.example/x"


@pytest.mark.asyncio
async def test_no_logging_without_debug(make_client):
    client, _ = make_client(_json({"status": "success"}))
    with capture_logs() as logs:
        await client.send_direct({"action": "status"})
    assert logs == []


@pytest.mark.asyncio
async def test_async_context_manager_closes_owned_client():
    async with LiqPayClient(public_key="pub_1", private_key="priv_1") as client:
        http_client = client.client
    assert http_client.is_closed is True
