"""
Adapter: upstream trading API client.

Implements the TradingApiPort with httpx. Every signed call gets a fresh
timestamp and signature; nothing is retried, because a retried request
must be re-signed from scratch. Upstream and transport failures are
translated here and never escape as exceptions.
"""

import logging
import time
from typing import Any, Callable, Optional
from urllib.parse import urlparse

import httpx

from tradelink.domain.brokerage.canonical import join_path
from tradelink.domain.brokerage.entities import (
    CredentialPair,
    GatewayResult,
    SignedRequest,
    TransportFailure,
)
from tradelink.domain.brokerage.error_translator import (
    signing_failure,
    translate_status,
    translate_transport,
)
from tradelink.domain.brokerage.errors import SignatureGenerationError
from tradelink.domain.brokerage.ports import RequestSigner, TradingApiPort

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_HEADER_PREFIX = "KALSHI-"


def _now_ms() -> int:
    return int(time.time() * 1000)


class UpstreamClient(TradingApiPort):
    """Signed HTTP client for the upstream trading API.

    Args:
        base_url: Host plus versioned base path, e.g.
            ``https://demo-api.kalshi.co/trade-api/v2``.
        signer: RequestSigner producing ACCESS-SIGNATURE values.
        timeout_seconds: Per-call timeout.
        header_prefix: Prefix of the ACCESS-* header names.
        transport: Optional httpx transport, used by tests.
        clock: Millisecond clock, used by tests.
    """

    def __init__(
        self,
        base_url: str,
        signer: RequestSigner,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        header_prefix: str = DEFAULT_HEADER_PREFIX,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        parsed = urlparse(base_url.rstrip("/"))
        self._origin = f"{parsed.scheme}://{parsed.netloc}"
        self._base_path = parsed.path
        self._signer = signer
        self._timeout = httpx.Timeout(timeout_seconds)
        self._header_prefix = header_prefix
        self._transport = transport
        self._clock = clock

    def sign_request(
        self, method: str, path: str, credentials: CredentialPair
    ) -> SignedRequest:
        """Sign a single call to an operation path.

        The signed path is the versioned base path joined with ``path``,
        which is the path the request is routed to.

        Raises:
            SignatureGenerationError: If the key material is unusable.
        """
        signed_path = join_path(self._base_path, path)
        timestamp_ms = self._clock()
        signature = self._signer.sign(
            method, signed_path, timestamp_ms, credentials.private_key
        )
        return SignedRequest(
            method=method.upper(),
            path=signed_path,
            timestamp_ms=timestamp_ms,
            signature=signature,
        )

    def auth_headers(
        self, credentials: CredentialPair, signed: SignedRequest
    ) -> dict[str, str]:
        """Return the ACCESS-* headers for one signed request."""
        prefix = self._header_prefix
        return {
            f"{prefix}ACCESS-KEY": credentials.access_key_id,
            f"{prefix}ACCESS-SIGNATURE": signed.signature,
            f"{prefix}ACCESS-TIMESTAMP": str(signed.timestamp_ms),
        }

    async def call(
        self,
        method: str,
        path: str,
        credentials: CredentialPair,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> GatewayResult:
        """Sign and send one request. See TradingApiPort.call."""
        try:
            signed = self.sign_request(method, path, credentials)
        except SignatureGenerationError as exc:
            logger.warning("Request signing failed for %s %s: %s", method, path, exc.message)
            return GatewayResult(failure=signing_failure())

        headers = self.auth_headers(credentials, signed)
        return await self._send(signed.method, path, headers, params, json)

    async def call_public(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> GatewayResult:
        """Send one unsigned request. See TradingApiPort.call_public."""
        return await self._send(method.upper(), path, {}, params, None)

    async def _send(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        params: Optional[dict[str, Any]],
        json: Optional[dict[str, Any]],
    ) -> GatewayResult:
        """Issue the HTTP request and translate its outcome."""
        # same joined path the signature covers
        url = f"{self._origin}{join_path(self._base_path, path)}"
        headers = {"Accept": "application/json", **headers}
        start = time.monotonic()

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method, url, params=params, json=json, headers=headers
                )
        except httpx.TimeoutException:
            logger.warning("Upstream %s %s timed out", method, path)
            return GatewayResult(failure=translate_transport(TransportFailure.TIMEOUT))
        except httpx.ConnectError as exc:
            logger.warning("Upstream %s %s unreachable: %s", method, path, exc)
            return GatewayResult(
                failure=translate_transport(TransportFailure.UNREACHABLE)
            )
        except httpx.HTTPError as exc:
            logger.error("Upstream %s %s transport error: %s", method, path, type(exc).__name__)
            return GatewayResult(failure=translate_transport(TransportFailure.OTHER))

        elapsed = (time.monotonic() - start) * 1000
        body = self._decode(response)
        logger.info(
            "Upstream %s %s -> %d (%.1f ms)",
            method,
            path,
            response.status_code,
            elapsed,
        )

        if response.is_success:
            return GatewayResult.success(body)
        return GatewayResult(failure=translate_status(response.status_code, body))

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None
