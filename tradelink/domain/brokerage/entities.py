"""
Domain entities for the brokerage bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

PREVIEW_HEAD = 8
PREVIEW_TAIL = 4


class HttpMethod(Enum):
    """HTTP methods the upstream trading API accepts on signed endpoints."""

    GET = "GET"
    POST = "POST"


class ConnectionStatus(Enum):
    """Derived connection state of a principal's stored credentials."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    INVALID = "invalid"


class VerificationReason(Enum):
    """Why a connection check failed."""

    INVALID_CREDENTIALS = "invalid-credentials"
    INSUFFICIENT_PERMISSIONS = "insufficient-permissions"
    UPSTREAM_UNREACHABLE = "upstream-unreachable"
    MALFORMED_KEY = "malformed-key"
    UPSTREAM_ERROR = "upstream-error"


VERIFICATION_MESSAGES: dict[VerificationReason, str] = {
    VerificationReason.INVALID_CREDENTIALS: (
        "Invalid credentials. Please check your Access Key ID and Private Key."
    ),
    VerificationReason.INSUFFICIENT_PERMISSIONS: (
        "Credentials are valid but lack required permissions."
    ),
    VerificationReason.UPSTREAM_UNREACHABLE: (
        "Unable to reach the trading API. Please try again later."
    ),
    VerificationReason.MALFORMED_KEY: (
        "Invalid private key format. Please ensure your private key is "
        "valid base64 or PEM format."
    ),
    VerificationReason.UPSTREAM_ERROR: (
        "Failed to verify the connection. Please check your credentials "
        "and try again."
    ),
}


class GatewayErrorKind(Enum):
    """Closed set of failures any gateway operation may report."""

    AUTHENTICATION_FAILED = "authentication_failed"
    PERMISSION_DENIED = "permission_denied"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INVALID_REQUEST = "invalid_request"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    UPSTREAM_UNREACHABLE = "upstream_unreachable"
    SIGNATURE_GENERATION_ERROR = "signature_generation_error"
    UPSTREAM_ERROR = "upstream_error"


class TransportFailure(Enum):
    """Classes of network failure seen before any upstream status exists."""

    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    OTHER = "other"


@dataclass(frozen=True)
class CredentialPair:
    """Access key id and RSA private key owned by a single principal.

    The private key is either a full PEM document or bare base64
    key material as distributed by the credential issuer.
    """

    access_key_id: str
    private_key: str = field(repr=False)

    @property
    def access_key_preview(self) -> str:
        """Return a shortened key id safe to show back to the user."""
        key_id = self.access_key_id
        if len(key_id) <= PREVIEW_HEAD + PREVIEW_TAIL:
            return key_id
        return f"{key_id[:PREVIEW_HEAD]}...{key_id[-PREVIEW_TAIL:]}"


@dataclass(frozen=True)
class SignedRequest:
    """Signature material for exactly one outbound call.

    Built fresh per call and never reused: the signature only
    authenticates this (method, path, timestamp) triple.
    """

    method: str
    path: str
    timestamp_ms: int
    signature: str = field(repr=False)


@dataclass(frozen=True)
class GatewayFailure:
    """A translated failure from the closed error taxonomy.

    Attributes:
        kind: The local error kind.
        status_code: Upstream HTTP status when one was received.
        message: Upstream-provided message, only kept for invalid requests.
    """

    kind: GatewayErrorKind
    status_code: Optional[int] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class GatewayResult:
    """Outcome of a gateway call: a payload or a failure, never both."""

    payload: Any = None
    failure: Optional[GatewayFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, payload: Any) -> "GatewayResult":
        return cls(payload=payload)

    @classmethod
    def error(
        cls,
        kind: GatewayErrorKind,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
    ) -> "GatewayResult":
        return cls(failure=GatewayFailure(kind, status_code, message))


@dataclass(frozen=True)
class ConnectionReport:
    """Live connection status plus a safe preview of the stored key id."""

    status: ConnectionStatus
    access_key_preview: Optional[str] = None

    @property
    def has_credentials(self) -> bool:
        return self.status is not ConnectionStatus.DISCONNECTED


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a connection check.

    Attributes:
        success: True when the check authenticated.
        reason: Why the check failed, None on success.
        balance: Balance payload returned by a successful check.
    """

    success: bool
    reason: Optional[VerificationReason] = None
    balance: Optional[dict] = None

    @property
    def message(self) -> str:
        if self.reason is None:
            return "Connection successful"
        return VERIFICATION_MESSAGES[self.reason]
