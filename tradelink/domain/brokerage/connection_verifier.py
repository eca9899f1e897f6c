"""
Connection verification for brokerage credentials.

Replays a fixed low-risk signed call (``GET /portfolio/balance``) to
decide whether a credential pair authenticates. Status is always live:
nothing about a previous check is remembered.
"""

import logging

from tradelink.domain.brokerage.entities import (
    ConnectionReport,
    ConnectionStatus,
    CredentialPair,
    HttpMethod,
    VerificationResult,
)
from tradelink.domain.brokerage.error_translator import verification_reason
from tradelink.domain.brokerage.ports import CredentialStore, TradingApiPort

logger = logging.getLogger(__name__)

VERIFY_PATH = "/portfolio/balance"


class ConnectionVerifier:
    """Validates credential pairs against the upstream API.

    Used both before a pair is persisted and to report the health of
    the pair currently stored for a principal.
    """

    def __init__(
        self, trading_api: TradingApiPort, credential_store: CredentialStore
    ) -> None:
        self._trading_api = trading_api
        self._credential_store = credential_store

    async def verify(self, access_key_id: str, private_key: str) -> VerificationResult:
        """Run the balance call with the given pair.

        Args:
            access_key_id: Upstream access key identifier.
            private_key: PEM or bare base64 RSA private key.

        Returns:
            VerificationResult with success flag and failure reason.
        """
        pair = CredentialPair(access_key_id=access_key_id, private_key=private_key)
        result = await self._trading_api.call(HttpMethod.GET.value, VERIFY_PATH, pair)

        if result.ok:
            balance = result.payload if isinstance(result.payload, dict) else None
            return VerificationResult(success=True, balance=balance)

        reason = verification_reason(result.failure)
        logger.info(
            "Connection check failed: kind=%s, status=%s, reason=%s",
            result.failure.kind.value,
            result.failure.status_code,
            reason.value,
        )
        return VerificationResult(success=False, reason=reason)

    async def get_status(self, principal_id: str) -> ConnectionReport:
        """Return the live connection status for a principal.

        A principal without stored credentials is ``disconnected`` and no
        upstream call is made. Otherwise the check is replayed with the
        pair fetched here, once.
        """
        pair = self._credential_store.get_credentials(principal_id)
        if pair is None:
            return ConnectionReport(status=ConnectionStatus.DISCONNECTED)

        result = await self.verify(pair.access_key_id, pair.private_key)
        status = ConnectionStatus.CONNECTED if result.success else ConnectionStatus.INVALID
        return ConnectionReport(status=status, access_key_preview=pair.access_key_preview)
