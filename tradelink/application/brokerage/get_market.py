"""
Use case: Look up a single market by ticker.

Input: GetMarketQuery (ticker)
Output: MarketResult
Side effects: None.
Failure cases: ResourceNotFoundError and the rest of the GatewayError family.
"""

import logging
from urllib.parse import quote

from tradelink.application.brokerage.dtos import GetMarketQuery, MarketResult
from tradelink.domain.brokerage.errors import (
    GatewayError,
    ResourceNotFoundError,
    error_for_failure,
)
from tradelink.domain.brokerage.gateway import SignedRequestGateway

logger = logging.getLogger(__name__)


class GetMarketUseCase:
    """Fetches one public market object, unsigned and untransformed."""

    def __init__(self, gateway: SignedRequestGateway) -> None:
        self._gateway = gateway

    async def execute(self, query: GetMarketQuery) -> MarketResult:
        """Run the market lookup use case.

        Raises:
            ResourceNotFoundError: If the upstream has no such market.
            GatewayError: Any other translated upstream failure.
        """
        path = f"/markets/{quote(query.ticker, safe='')}"
        result = await self._gateway.public_get(path)
        if not result.ok:
            raise error_for_failure(result.failure)

        if not isinstance(result.payload, dict):
            raise GatewayError("Unexpected upstream payload for market")
        market = result.payload.get("market")
        if not market:
            raise ResourceNotFoundError(f"Market not found: {query.ticker}")
        if not isinstance(market, dict):
            raise GatewayError("Unexpected upstream payload for market")
        return MarketResult(market=market)
