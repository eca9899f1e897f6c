"""
Tests for the upstream trading API client.

The network is replaced by ``httpx.MockTransport``; requests are captured
so headers and signatures can be checked against the real RSA key.
"""

import base64
import itertools
import json

import httpx
import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from tradelink.domain.brokerage.entities import CredentialPair, GatewayErrorKind
from tradelink.infrastructure.brokerage.rsa_pss_signer import RsaPssSigner
from tradelink.infrastructure.brokerage.upstream_client import UpstreamClient

BASE_URL = "https://demo-api.kalshi.co/trade-api/v2"
ACCESS_KEY_ID = "key-1234567890"


def _client(handler, **kwargs) -> UpstreamClient:
    return UpstreamClient(
        base_url=BASE_URL,
        signer=RsaPssSigner(),
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def _verify(public_key, request: httpx.Request, prefix: str = "KALSHI-") -> None:
    """Check the request signature covers timestamp + method + path."""
    timestamp = request.headers[f"{prefix}ACCESS-TIMESTAMP"]
    message = f"{timestamp}{request.method}{request.url.path}".encode("utf-8")
    public_key.verify(
        base64.b64decode(request.headers[f"{prefix}ACCESS-SIGNATURE"]),
        message,
        padding.PSS(mgf=padding.MGF1(hashes.SHA256()), salt_length=32),
        hashes.SHA256(),
    )


@pytest.fixture
def pair(pkcs1_pem) -> CredentialPair:
    return CredentialPair(access_key_id=ACCESS_KEY_ID, private_key=pkcs1_pem)


class TestSignedCall:
    """Tests for header attachment and signing."""

    @pytest.mark.asyncio
    async def test_success_returns_payload(self, pair) -> None:
        client = _client(lambda request: httpx.Response(200, json={"balance": 1000}))
        result = await client.call("GET", "/portfolio/balance", pair)
        assert result.ok
        assert result.payload == {"balance": 1000}

    @pytest.mark.asyncio
    async def test_attaches_access_headers(self, rsa_key, pair) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={})

        client = _client(handler, clock=lambda: 1703123456789)
        await client.call("GET", "/portfolio/balance", pair)

        request = captured[0]
        assert request.url.path == "/trade-api/v2/portfolio/balance"
        assert request.headers["KALSHI-ACCESS-KEY"] == ACCESS_KEY_ID
        assert request.headers["KALSHI-ACCESS-TIMESTAMP"] == "1703123456789"
        _verify(rsa_key.public_key(), request)

    @pytest.mark.asyncio
    async def test_query_params_sent_but_not_signed(self, rsa_key, pair) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"orders": []})

        client = _client(handler)
        await client.call(
            "GET", "/portfolio/orders", pair, params={"limit": 5, "status": "resting"}
        )

        request = captured[0]
        assert request.url.params["limit"] == "5"
        assert request.url.params["status"] == "resting"
        # url.path has no query, so this proves the signature ignores it
        _verify(rsa_key.public_key(), request)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "base_url, path",
        [
            (BASE_URL, "portfolio/balance"),
            (BASE_URL + "/", "/portfolio/balance"),
        ],
    )
    async def test_routed_path_matches_signed_path(self, rsa_key, pair, base_url, path) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={})

        client = UpstreamClient(
            base_url=base_url,
            signer=RsaPssSigner(),
            transport=httpx.MockTransport(handler),
        )
        await client.call("GET", path, pair)

        request = captured[0]
        assert request.url.path == "/trade-api/v2/portfolio/balance"
        _verify(rsa_key.public_key(), request)

    @pytest.mark.asyncio
    async def test_empty_header_prefix(self, rsa_key, pair) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={})

        client = _client(handler, header_prefix="")
        await client.call("GET", "/portfolio/balance", pair)

        request = captured[0]
        assert request.headers["ACCESS-KEY"] == ACCESS_KEY_ID
        _verify(rsa_key.public_key(), request, prefix="")

    @pytest.mark.asyncio
    async def test_every_call_gets_fresh_timestamp(self, rsa_key, pair) -> None:
        captured: list[httpx.Request] = []
        ticks = itertools.count(1_000)

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={})

        client = _client(handler, clock=lambda: next(ticks))
        await client.call("GET", "/portfolio/balance", pair)
        await client.call("GET", "/portfolio/balance", pair)

        timestamps = [r.headers["KALSHI-ACCESS-TIMESTAMP"] for r in captured]
        assert timestamps == ["1000", "1001"]
        for request in captured:
            _verify(rsa_key.public_key(), request)

    @pytest.mark.asyncio
    async def test_post_sends_json_body(self, rsa_key, pair) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(201, json={"ok": True})

        client = _client(handler)
        result = await client.call("post", "/portfolio/orders", pair, json={"count": 1})

        assert result.ok
        assert captured[0].method == "POST"
        assert json.loads(captured[0].content) == {"count": 1}
        _verify(rsa_key.public_key(), captured[0])

    @pytest.mark.asyncio
    async def test_malformed_key_never_sends_request(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        client = _client(handler)
        bad = CredentialPair(access_key_id=ACCESS_KEY_ID, private_key="garbage")
        result = await client.call("GET", "/portfolio/balance", bad)

        assert not result.ok
        assert result.failure.kind is GatewayErrorKind.SIGNATURE_GENERATION_ERROR
        assert calls == []

    @pytest.mark.asyncio
    async def test_undersized_key_never_sends_request(self, undersized_pem) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        small = CredentialPair(access_key_id=ACCESS_KEY_ID, private_key=undersized_pem)
        result = await _client(handler).call("GET", "/portfolio/balance", small)

        assert result.failure.kind is GatewayErrorKind.SIGNATURE_GENERATION_ERROR
        assert calls == []


class TestErrorTranslation:
    """Upstream statuses and transport failures come back as results."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code, kind",
        [
            (400, GatewayErrorKind.INVALID_REQUEST),
            (401, GatewayErrorKind.AUTHENTICATION_FAILED),
            (403, GatewayErrorKind.PERMISSION_DENIED),
            (404, GatewayErrorKind.RESOURCE_NOT_FOUND),
            (500, GatewayErrorKind.UPSTREAM_ERROR),
            (503, GatewayErrorKind.UPSTREAM_ERROR),
        ],
    )
    async def test_status_codes(self, pair, status_code, kind) -> None:
        client = _client(lambda request: httpx.Response(status_code, json={}))
        result = await client.call("GET", "/portfolio/balance", pair)
        assert result.failure.kind is kind
        assert result.failure.status_code == status_code

    @pytest.mark.asyncio
    async def test_bad_request_message_passed_through(self, pair) -> None:
        client = _client(
            lambda request: httpx.Response(400, json={"message": "invalid cursor"})
        )
        result = await client.call("GET", "/portfolio/orders", pair)
        assert result.failure.message == "invalid cursor"

    @pytest.mark.asyncio
    async def test_non_json_error_body(self, pair) -> None:
        client = _client(lambda request: httpx.Response(502, text="<html>bad gateway</html>"))
        result = await client.call("GET", "/portfolio/balance", pair)
        assert result.failure.kind is GatewayErrorKind.UPSTREAM_ERROR
        assert result.failure.status_code == 502

    @pytest.mark.asyncio
    async def test_timeout_is_upstream_timeout(self, pair) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        result = await _client(handler).call("GET", "/portfolio/balance", pair)
        assert result.failure.kind is GatewayErrorKind.UPSTREAM_TIMEOUT
        assert result.failure.status_code is None

    @pytest.mark.asyncio
    async def test_connect_timeout_is_upstream_timeout(self, pair) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("connect timed out", request=request)

        result = await _client(handler).call("GET", "/portfolio/balance", pair)
        assert result.failure.kind is GatewayErrorKind.UPSTREAM_TIMEOUT

    @pytest.mark.asyncio
    async def test_connection_refused_is_unreachable(self, pair) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

        result = await _client(handler).call("GET", "/portfolio/balance", pair)
        assert result.failure.kind is GatewayErrorKind.UPSTREAM_UNREACHABLE

    @pytest.mark.asyncio
    async def test_other_transport_error_is_generic(self, pair) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.RemoteProtocolError("peer closed connection", request=request)

        result = await _client(handler).call("GET", "/portfolio/balance", pair)
        assert result.failure.kind is GatewayErrorKind.UPSTREAM_ERROR

    @pytest.mark.asyncio
    async def test_timeout_is_not_retried(self, pair) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ReadTimeout("timed out", request=request)

        await _client(handler).call("GET", "/portfolio/balance", pair)
        assert len(calls) == 1


class TestPublicCall:
    """Tests for unsigned calls."""

    @pytest.mark.asyncio
    async def test_no_auth_headers(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"market": {"ticker": "KXBTC"}})

        result = await _client(handler).call_public("GET", "/markets/KXBTC")

        assert result.payload == {"market": {"ticker": "KXBTC"}}
        assert captured[0].url.path == "/trade-api/v2/markets/KXBTC"
        assert "KALSHI-ACCESS-SIGNATURE" not in captured[0].headers

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        client = _client(lambda request: httpx.Response(404, json={}))
        result = await client.call_public("GET", "/markets/NOPE")
        assert result.failure.kind is GatewayErrorKind.RESOURCE_NOT_FOUND
