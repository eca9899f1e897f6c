"""
Data Transfer Objects for the brokerage application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class ConnectBrokerageCommand:
    """Input DTO for verifying and storing a credential pair.

    Attributes:
        principal_id: Authenticated principal the pair belongs to.
        access_key_id: Upstream access key identifier.
        private_key: PEM or bare base64 RSA private key.
    """

    principal_id: str
    access_key_id: str
    private_key: str = field(repr=False)


@dataclass(frozen=True)
class ConnectBrokerageResult:
    """Output DTO for a successful connect.

    Attributes:
        status: Always ``connected``.
        access_key_preview: Shortened access key id.
        balance: Balance payload returned by the verification call.
    """

    status: str
    access_key_preview: str
    balance: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class ConnectionStatusQuery:
    """Input DTO for the live connection status check."""

    principal_id: str


@dataclass(frozen=True)
class ConnectionStatusResult:
    """Output DTO for the live connection status check.

    Attributes:
        status: ``disconnected``, ``connected`` or ``invalid``.
        has_credentials: Whether a pair is stored.
        access_key_preview: Shortened access key id, None when disconnected.
    """

    status: str
    has_credentials: bool
    access_key_preview: Optional[str] = None


@dataclass(frozen=True)
class DisconnectBrokerageCommand:
    """Input DTO for clearing a principal's stored pair."""

    principal_id: str


@dataclass(frozen=True)
class DisconnectBrokerageResult:
    """Output DTO for disconnect."""

    status: str


@dataclass(frozen=True)
class GetBalanceQuery:
    """Input DTO for the balance fetch."""

    principal_id: str


@dataclass(frozen=True)
class BalanceResult:
    """Output DTO carrying the upstream balance payload unchanged."""

    balance: dict[str, Any]


@dataclass(frozen=True)
class GetOrderHistoryQuery:
    """Input DTO for the order history fetch.

    Attributes:
        principal_id: Principal whose credentials sign the call.
        ticker: Market ticker filter.
        event_ticker: Event ticker filter.
        min_ts: Lower bound on order creation time (unix seconds).
        max_ts: Upper bound on order creation time (unix seconds).
        status: Order status filter (resting, canceled, executed).
        limit: Page size, 1-200.
        cursor: Pagination cursor from a previous page.
    """

    principal_id: str
    ticker: Optional[str] = None
    event_ticker: Optional[str] = None
    min_ts: Optional[int] = None
    max_ts: Optional[int] = None
    status: Optional[str] = None
    limit: int = 100
    cursor: Optional[str] = None


@dataclass(frozen=True)
class OrderHistoryResult:
    """Output DTO for one page of order history."""

    orders: list[dict[str, Any]]
    cursor: Optional[str] = None


@dataclass(frozen=True)
class GetMarketQuery:
    """Input DTO for a public market lookup."""

    ticker: str


@dataclass(frozen=True)
class MarketResult:
    """Output DTO carrying the upstream market object unchanged."""

    market: dict[str, Any]
