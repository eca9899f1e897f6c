"""
FastAPI routers for the brokerage bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas and Query constraints.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends, Path, Query, Request

from tradelink.application.brokerage.connect_brokerage import ConnectBrokerageUseCase
from tradelink.application.brokerage.disconnect_brokerage import (
    DisconnectBrokerageUseCase,
)
from tradelink.application.brokerage.dtos import (
    ConnectBrokerageCommand,
    ConnectionStatusQuery,
    DisconnectBrokerageCommand,
    GetBalanceQuery,
    GetMarketQuery,
    GetOrderHistoryQuery,
)
from tradelink.application.brokerage.get_balance import GetBalanceUseCase
from tradelink.application.brokerage.get_connection_status import (
    GetConnectionStatusUseCase,
)
from tradelink.application.brokerage.get_market import GetMarketUseCase
from tradelink.application.brokerage.get_order_history import (
    MAX_LIMIT,
    MIN_LIMIT,
    GetOrderHistoryUseCase,
)
from tradelink.interfaces.brokerage.dependencies import (
    get_balance_use_case,
    get_connect_brokerage_use_case,
    get_connection_status_use_case,
    get_disconnect_brokerage_use_case,
    get_market_use_case,
    get_order_history_use_case,
)
from tradelink.interfaces.brokerage.schemas import (
    ORDER_STATUS_PATTERN,
    TICKER_MAX_LEN,
    TICKER_PATTERN,
    BalanceResponse,
    ConnectionStatusResponse,
    ConnectRequest,
    ConnectResponse,
    DisconnectResponse,
    ErrorResponse,
    MarketResponse,
    OrderHistoryResponse,
)
from tradelink.shared.security.principal import get_current_principal
from tradelink.shared.security.rate_limiting import UPSTREAM_RATE_LIMIT, limiter

UPSTREAM_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}

router = APIRouter(prefix="/brokerage", tags=["brokerage"])
markets_router = APIRouter(prefix="/markets", tags=["markets"])


@router.post(
    "/connection/verify",
    response_model=ConnectResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Verify and store credentials",
    description=(
        "Call the upstream balance endpoint with the supplied key pair and "
        "store the pair only if the check authenticates."
    ),
)
@limiter.limit(UPSTREAM_RATE_LIMIT)
async def connect_brokerage(
    request: Request,
    body: ConnectRequest,
    principal_id: str = Depends(get_current_principal),
    use_case: ConnectBrokerageUseCase = Depends(get_connect_brokerage_use_case),
) -> ConnectResponse:
    """Verify a credential pair and store it for the current principal."""
    command = ConnectBrokerageCommand(
        principal_id=principal_id,
        access_key_id=body.access_key_id,
        private_key=body.private_key,
    )
    result = await use_case.execute(command)
    return ConnectResponse(
        status=result.status,
        access_key_preview=result.access_key_preview,
        balance=result.balance,
    )


@router.get(
    "/connection/status",
    response_model=ConnectionStatusResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Live connection status",
    description="Replays the verification call against the stored credentials.",
)
@limiter.limit(UPSTREAM_RATE_LIMIT)
async def get_connection_status(
    request: Request,
    principal_id: str = Depends(get_current_principal),
    use_case: GetConnectionStatusUseCase = Depends(get_connection_status_use_case),
) -> ConnectionStatusResponse:
    """Return disconnected, connected or invalid for the current principal."""
    result = await use_case.execute(ConnectionStatusQuery(principal_id=principal_id))
    return ConnectionStatusResponse(
        status=result.status,
        has_credentials=result.has_credentials,
        access_key_preview=result.access_key_preview,
    )


@router.delete(
    "/connection",
    response_model=DisconnectResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Disconnect",
    description="Clears the stored credentials unconditionally.",
)
def disconnect_brokerage(
    principal_id: str = Depends(get_current_principal),
    use_case: DisconnectBrokerageUseCase = Depends(get_disconnect_brokerage_use_case),
) -> DisconnectResponse:
    """Clear the stored credentials for the current principal."""
    result = use_case.execute(DisconnectBrokerageCommand(principal_id=principal_id))
    return DisconnectResponse(status=result.status)


@router.get(
    "/balance",
    response_model=BalanceResponse,
    responses=UPSTREAM_ERRORS,
    summary="Account balance",
    description="Signed proxy to the upstream portfolio balance endpoint.",
)
@limiter.limit(UPSTREAM_RATE_LIMIT)
async def get_balance(
    request: Request,
    principal_id: str = Depends(get_current_principal),
    use_case: GetBalanceUseCase = Depends(get_balance_use_case),
) -> BalanceResponse:
    """Return the upstream balance payload for the current principal."""
    result = await use_case.execute(GetBalanceQuery(principal_id=principal_id))
    return BalanceResponse(balance=result.balance)


@router.get(
    "/orders",
    response_model=OrderHistoryResponse,
    responses=UPSTREAM_ERRORS,
    summary="Order history",
    description="Signed proxy to the upstream portfolio orders endpoint.",
)
@limiter.limit(UPSTREAM_RATE_LIMIT)
async def get_order_history(
    request: Request,
    ticker: str | None = Query(default=None, max_length=TICKER_MAX_LEN, pattern=TICKER_PATTERN),
    event_ticker: str | None = Query(default=None, max_length=TICKER_MAX_LEN, pattern=TICKER_PATTERN),
    min_ts: int | None = Query(default=None, ge=0),
    max_ts: int | None = Query(default=None, ge=0),
    status: str | None = Query(default=None, pattern=ORDER_STATUS_PATTERN),
    limit: int = Query(default=100, ge=MIN_LIMIT, le=MAX_LIMIT),
    cursor: str | None = Query(default=None, max_length=512),
    principal_id: str = Depends(get_current_principal),
    use_case: GetOrderHistoryUseCase = Depends(get_order_history_use_case),
) -> OrderHistoryResponse:
    """Return one page of the current principal's order history."""
    query = GetOrderHistoryQuery(
        principal_id=principal_id,
        ticker=ticker,
        event_ticker=event_ticker,
        min_ts=min_ts,
        max_ts=max_ts,
        status=status,
        limit=limit,
        cursor=cursor,
    )
    result = await use_case.execute(query)
    return OrderHistoryResponse(orders=result.orders, cursor=result.cursor)


@markets_router.get(
    "/{ticker}",
    response_model=MarketResponse,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Market by ticker",
    description="Unsigned lookup of a single upstream market, returned as received.",
)
async def get_market(
    ticker: str = Path(..., max_length=TICKER_MAX_LEN, pattern=TICKER_PATTERN),
    use_case: GetMarketUseCase = Depends(get_market_use_case),
) -> MarketResponse:
    """Return the upstream market object for a ticker."""
    result = await use_case.execute(GetMarketQuery(ticker=ticker))
    return MarketResponse(market=result.market)
