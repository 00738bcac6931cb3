"""Razorpay adapter against a mocked HTTP transport."""

import base64
import json

import httpx

from atelier.errors import ErrorKind
from atelier.gateway import RazorpayGateway

from .conftest import err, ok


def _gateway(handler, key_id="rzp_test_key", key_secret="secret") -> RazorpayGateway:
    return RazorpayGateway(
        key_id,
        key_secret,
        base_url="https://rzp.test/v1",
        transport=httpx.MockTransport(handler),
    )


def _echo(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(
        200,
        json={
            "id": "order_abc",
            "amount": body["amount"],
            "currency": body["currency"],
            "receipt": body["receipt"],
            "status": "created",
        },
    )


class TestCreateIntent:
    async def test_posts_order_with_basic_auth(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _echo(request)

        intent = ok(await _gateway(handler).create_intent(149900, "INR", "ord_1"))

        assert intent.id == "order_abc"
        assert intent.receipt == "ord_1"
        (request,) = seen
        assert request.method == "POST"
        assert request.url.path == "/v1/orders"
        assert json.loads(request.content) == {
            "amount": 149900,
            "currency": "INR",
            "receipt": "ord_1",
            "payment_capture": 1,
        }
        expected = base64.b64encode(b"rzp_test_key:secret").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"

    async def test_echoed_amount_must_match(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json={"id": "order_abc", "amount": 1, "currency": "INR"}
            )

        e = err(await _gateway(handler).create_intent(149900, "INR", "ord_1"))
        assert e.kind is ErrorKind.GATEWAY_UNAVAILABLE

    async def test_server_error_is_unavailable(self):
        e = err(
            await _gateway(lambda r: httpx.Response(500)).create_intent(100, "INR", "ord_1")
        )
        assert e.kind is ErrorKind.GATEWAY_UNAVAILABLE

    async def test_connection_error_is_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        e = err(await _gateway(handler).create_intent(100, "INR", "ord_1"))
        assert e.kind is ErrorKind.GATEWAY_UNAVAILABLE

    async def test_missing_keys_never_call_out(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return _echo(request)

        e = err(await _gateway(handler, key_secret="").create_intent(100, "INR", "ord_1"))

        assert e.kind is ErrorKind.GATEWAY_UNAVAILABLE
        assert calls == []


class TestFetchIntent:
    async def test_reads_receipt(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v1/orders/order_abc"
            return httpx.Response(
                200,
                json={"id": "order_abc", "amount": 100, "currency": "INR", "receipt": "ord_9"},
            )

        intent = ok(await _gateway(handler).fetch_intent("order_abc"))
        assert intent.receipt == "ord_9"

    async def test_unknown_intent_is_not_found(self):
        e = err(await _gateway(lambda r: httpx.Response(404)).fetch_intent("order_x"))
        assert e.kind is ErrorKind.NOT_FOUND

    async def test_malformed_body_is_unavailable(self):
        e = err(
            await _gateway(lambda r: httpx.Response(200, json=["nope"])).fetch_intent("order_x")
        )
        assert e.kind is ErrorKind.GATEWAY_UNAVAILABLE
