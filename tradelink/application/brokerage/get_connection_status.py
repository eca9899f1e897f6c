"""
Use case: Report the live connection status for a principal.

Input: ConnectionStatusQuery (principal_id)
Output: ConnectionStatusResult
Side effects: One upstream check when credentials are stored.
Failure cases: None. Verification failures surface as status ``invalid``.
"""

import logging

from tradelink.application.brokerage.dtos import (
    ConnectionStatusQuery,
    ConnectionStatusResult,
)
from tradelink.domain.brokerage.connection_verifier import ConnectionVerifier

logger = logging.getLogger(__name__)


class GetConnectionStatusUseCase:
    """Derives connection status by replaying the verification call."""

    def __init__(self, verifier: ConnectionVerifier) -> None:
        self._verifier = verifier

    async def execute(self, query: ConnectionStatusQuery) -> ConnectionStatusResult:
        """Run the status use case."""
        report = await self._verifier.get_status(query.principal_id)
        logger.info(
            "Connection status for principal=%s: %s",
            query.principal_id,
            report.status.value,
        )
        return ConnectionStatusResult(
            status=report.status.value,
            has_credentials=report.has_credentials,
            access_key_preview=report.access_key_preview,
        )
