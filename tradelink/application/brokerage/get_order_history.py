"""
Use case: Fetch a page of the principal's order history from the upstream.

Input: GetOrderHistoryQuery (principal_id, filters, limit, cursor)
Output: OrderHistoryResult
Side effects: None.
Failure cases: InvalidQueryError, CredentialsNotConfiguredError, any GatewayError.
"""

import logging
from typing import Any

from tradelink.application.brokerage.dtos import GetOrderHistoryQuery, OrderHistoryResult
from tradelink.domain.brokerage.errors import (
    GatewayError,
    InvalidQueryError,
    error_for_failure,
)
from tradelink.domain.brokerage.gateway import SignedRequestGateway

logger = logging.getLogger(__name__)

ORDERS_PATH = "/portfolio/orders"
MIN_LIMIT = 1
MAX_LIMIT = 200

_FILTER_FIELDS = ("ticker", "event_ticker", "min_ts", "max_ts", "status", "cursor")


class GetOrderHistoryUseCase:
    """Proxies a signed order history request for a principal.

    Query parameters travel on the URL only; the signature covers the
    path without them.
    """

    def __init__(self, gateway: SignedRequestGateway) -> None:
        self._gateway = gateway

    async def execute(self, query: GetOrderHistoryQuery) -> OrderHistoryResult:
        """Run the order history use case.

        Raises:
            InvalidQueryError: If limit is outside 1-200.
            CredentialsNotConfiguredError: If no pair is stored.
            GatewayError: Translated upstream or signing failure, or a 2xx
                body that is not an orders page.
        """
        if not (MIN_LIMIT <= query.limit <= MAX_LIMIT):
            raise InvalidQueryError(
                f"Limit must be between {MIN_LIMIT} and {MAX_LIMIT}"
            )

        params: dict[str, Any] = {
            name: getattr(query, name)
            for name in _FILTER_FIELDS
            if getattr(query, name) not in (None, "")
        }
        params["limit"] = query.limit

        logger.info(
            "Fetching order history for principal=%s, filters=%s",
            query.principal_id,
            sorted(params),
        )

        result = await self._gateway.proxy_authenticated_get(
            query.principal_id, ORDERS_PATH, params=params
        )
        if not result.ok:
            raise error_for_failure(result.failure)

        payload = result.payload
        if not isinstance(payload, dict):
            raise GatewayError("Unexpected upstream payload for order history")

        orders = payload.get("orders") or []
        cursor = payload.get("cursor") or None
        well_formed = (
            isinstance(orders, list)
            and all(isinstance(order, dict) for order in orders)
            and isinstance(cursor, (str, type(None)))
        )
        if not well_formed:
            raise GatewayError("Unexpected upstream payload for order history")
        return OrderHistoryResult(orders=orders, cursor=cursor)
