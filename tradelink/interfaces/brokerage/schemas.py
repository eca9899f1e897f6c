"""
Pydantic schemas for brokerage API request/response validation.

These schemas enforce input validation and define the API contract.
All fields use strict typing with constraints.
No business logic belongs here.
"""

from typing import Any

from pydantic import BaseModel, Field

TICKER_PATTERN = r"^[A-Za-z0-9._-]+$"
TICKER_MAX_LEN = 100
ACCESS_KEY_MAX_LEN = 255
PRIVATE_KEY_MAX_LEN = 16_384
ORDER_STATUS_PATTERN = r"^(resting|canceled|executed)$"


class ConnectRequest(BaseModel):
    """Request schema for the connect endpoint.

    Attributes:
        access_key_id: Upstream access key identifier.
        private_key: RSA private key, PEM or bare base64.
    """

    access_key_id: str = Field(
        ...,
        min_length=1,
        max_length=ACCESS_KEY_MAX_LEN,
        description="Upstream API access key id",
    )
    private_key: str = Field(
        ...,
        min_length=1,
        max_length=PRIVATE_KEY_MAX_LEN,
        description="RSA private key (PEM or base64 body)",
        repr=False,
    )


class ConnectResponse(BaseModel):
    """Response schema for a successful connect."""

    status: str
    access_key_preview: str
    balance: dict[str, Any] | None = None


class ConnectionStatusResponse(BaseModel):
    """Response schema for the live connection status."""

    status: str = Field(..., description="disconnected, connected or invalid")
    has_credentials: bool
    access_key_preview: str | None = None


class DisconnectResponse(BaseModel):
    """Response schema for disconnect."""

    status: str


class BalanceResponse(BaseModel):
    """Response schema for the balance endpoint (upstream payload)."""

    balance: dict[str, Any]


class OrderHistoryResponse(BaseModel):
    """Response schema for one page of order history."""

    orders: list[dict[str, Any]]
    cursor: str | None = None


class MarketResponse(BaseModel):
    """Response schema for a market lookup (upstream market object)."""

    market: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response schema.

    Attributes:
        error: Short error description.
        detail: Optional additional detail.
        kind: Gateway error kind, for upstream-related failures.
        reason: Verification reason, for failed connect attempts.
    """

    error: str
    detail: str | None = None
    kind: str | None = None
    reason: str | None = None


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    version: str
