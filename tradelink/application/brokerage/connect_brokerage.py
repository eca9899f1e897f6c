"""
Use case: Verify a credential pair and store it for a principal.

Input: ConnectBrokerageCommand (principal_id, access_key_id, private_key)
Output: ConnectBrokerageResult
Side effects: Persists the pair, only when verification succeeds.
Failure cases: ConnectionVerificationError.
"""

import logging

from tradelink.application.brokerage.dtos import (
    ConnectBrokerageCommand,
    ConnectBrokerageResult,
)
from tradelink.domain.brokerage.connection_verifier import ConnectionVerifier
from tradelink.domain.brokerage.entities import ConnectionStatus, CredentialPair
from tradelink.domain.brokerage.errors import ConnectionVerificationError
from tradelink.domain.brokerage.ports import CredentialStore

logger = logging.getLogger(__name__)


class ConnectBrokerageUseCase:
    """Orchestrates verify-then-persist for a new credential pair.

    A pair that fails verification is never written, so a failed
    attempt leaves whatever was stored before untouched.
    """

    def __init__(
        self, verifier: ConnectionVerifier, credential_store: CredentialStore
    ) -> None:
        self._verifier = verifier
        self._credential_store = credential_store

    async def execute(self, command: ConnectBrokerageCommand) -> ConnectBrokerageResult:
        """Run the connect use case.

        Args:
            command: Principal and the candidate credential pair.

        Returns:
            Connected status, key preview and the check's balance payload.

        Raises:
            ConnectionVerificationError: If the check does not authenticate.
        """
        pair = CredentialPair(
            access_key_id=command.access_key_id.strip(),
            private_key=command.private_key,
        )
        logger.info(
            "Verifying brokerage credentials for principal=%s, key=%s",
            command.principal_id,
            pair.access_key_preview,
        )

        result = await self._verifier.verify(pair.access_key_id, pair.private_key)
        if not result.success:
            raise ConnectionVerificationError(result.reason, result.message)

        self._credential_store.set_credentials(command.principal_id, pair)

        return ConnectBrokerageResult(
            status=ConnectionStatus.CONNECTED.value,
            access_key_preview=pair.access_key_preview,
            balance=result.balance,
        )
