"""
Domain-specific errors for the brokerage bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from typing import Optional

from tradelink.domain.brokerage.entities import (
    GatewayErrorKind,
    GatewayFailure,
    VerificationReason,
)


class BrokerageDomainError(Exception):
    """Base error for all brokerage domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class CredentialsNotConfiguredError(BrokerageDomainError):
    """Raised when a principal has no stored credential pair."""

    def __init__(self, principal_id: str) -> None:
        super().__init__(f"Brokerage credentials not configured for {principal_id}")
        self.principal_id = principal_id


class ConnectionVerificationError(BrokerageDomainError):
    """Raised when a connect attempt fails its verification call."""

    def __init__(self, reason: VerificationReason, detail: str) -> None:
        super().__init__(f"Connection verification failed: {reason.value}")
        self.reason = reason
        self.detail = detail


class CredentialStoreError(BrokerageDomainError):
    """Raised when stored credentials cannot be read back."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Credential store error: {reason}")
        self.reason = reason


class InvalidQueryError(BrokerageDomainError):
    """Raised when a proxied query parameter is out of range."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class GatewayError(BrokerageDomainError):
    """Base for errors from the closed gateway error taxonomy."""

    kind = GatewayErrorKind.UPSTREAM_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        upstream_message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.upstream_message = upstream_message


class AuthenticationFailedError(GatewayError):
    """Upstream rejected the signed request (HTTP 401)."""

    kind = GatewayErrorKind.AUTHENTICATION_FAILED


class PermissionDeniedError(GatewayError):
    """Credentials authenticate but lack scope (HTTP 403)."""

    kind = GatewayErrorKind.PERMISSION_DENIED


class ResourceNotFoundError(GatewayError):
    """Upstream resource does not exist (HTTP 404)."""

    kind = GatewayErrorKind.RESOURCE_NOT_FOUND


class InvalidUpstreamRequestError(GatewayError):
    """Upstream refused the request parameters (HTTP 400)."""

    kind = GatewayErrorKind.INVALID_REQUEST


class UpstreamTimeoutError(GatewayError):
    """Upstream did not answer within the per-call timeout."""

    kind = GatewayErrorKind.UPSTREAM_TIMEOUT


class UpstreamUnreachableError(GatewayError):
    """DNS failure or refused connection toward the upstream host."""

    kind = GatewayErrorKind.UPSTREAM_UNREACHABLE


class SignatureGenerationError(GatewayError):
    """Key material could not be parsed or used to sign a request.

    Never retried, and never answered by sending the request unsigned.
    """

    kind = GatewayErrorKind.SIGNATURE_GENERATION_ERROR


_ERRORS_BY_KIND: dict[GatewayErrorKind, type[GatewayError]] = {
    cls.kind: cls
    for cls in (
        AuthenticationFailedError,
        PermissionDeniedError,
        ResourceNotFoundError,
        InvalidUpstreamRequestError,
        UpstreamTimeoutError,
        UpstreamUnreachableError,
        SignatureGenerationError,
        GatewayError,
    )
}


def error_for_failure(failure: GatewayFailure) -> GatewayError:
    """Build the domain error matching a translated gateway failure."""
    error_cls = _ERRORS_BY_KIND[failure.kind]
    if failure.status_code is not None:
        message = f"Upstream {failure.kind.value} (status {failure.status_code})"
    else:
        message = f"Upstream {failure.kind.value}"
    return error_cls(
        message,
        status_code=failure.status_code,
        upstream_message=failure.message,
    )
