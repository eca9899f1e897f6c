"""
Use case: Fetch the principal's account balance from the upstream.

Input: GetBalanceQuery (principal_id)
Output: BalanceResult
Side effects: None.
Failure cases: CredentialsNotConfiguredError, any GatewayError.
"""

import logging

from tradelink.application.brokerage.dtos import BalanceResult, GetBalanceQuery
from tradelink.domain.brokerage.errors import GatewayError, error_for_failure
from tradelink.domain.brokerage.gateway import SignedRequestGateway

logger = logging.getLogger(__name__)

BALANCE_PATH = "/portfolio/balance"


class GetBalanceUseCase:
    """Proxies a signed balance request for a principal."""

    def __init__(self, gateway: SignedRequestGateway) -> None:
        self._gateway = gateway

    async def execute(self, query: GetBalanceQuery) -> BalanceResult:
        """Run the balance use case.

        Raises:
            CredentialsNotConfiguredError: If no pair is stored.
            GatewayError: Translated upstream or signing failure, or a 2xx
                body that is not a JSON object.
        """
        logger.info("Fetching balance for principal=%s", query.principal_id)
        result = await self._gateway.proxy_authenticated_get(
            query.principal_id, BALANCE_PATH
        )
        if not result.ok:
            raise error_for_failure(result.failure)

        if not isinstance(result.payload, dict):
            raise GatewayError("Unexpected upstream payload for balance")
        return BalanceResult(balance=result.payload)
