"""
Upstream error translation.

A single mapping table from upstream HTTP statuses and transport
failure classes to the closed local error taxonomy. Every operation that
talks to the upstream (balance, orders, market lookup, connection verify)
goes through here so callers see one vocabulary.
"""

from typing import Any, Optional

from tradelink.domain.brokerage.entities import (
    GatewayErrorKind,
    GatewayFailure,
    TransportFailure,
    VerificationReason,
)

STATUS_KINDS: dict[int, GatewayErrorKind] = {
    400: GatewayErrorKind.INVALID_REQUEST,
    401: GatewayErrorKind.AUTHENTICATION_FAILED,
    403: GatewayErrorKind.PERMISSION_DENIED,
    404: GatewayErrorKind.RESOURCE_NOT_FOUND,
}

TRANSPORT_KINDS: dict[TransportFailure, GatewayErrorKind] = {
    TransportFailure.TIMEOUT: GatewayErrorKind.UPSTREAM_TIMEOUT,
    TransportFailure.UNREACHABLE: GatewayErrorKind.UPSTREAM_UNREACHABLE,
    TransportFailure.OTHER: GatewayErrorKind.UPSTREAM_ERROR,
}

VERIFICATION_REASONS: dict[GatewayErrorKind, VerificationReason] = {
    GatewayErrorKind.AUTHENTICATION_FAILED: VerificationReason.INVALID_CREDENTIALS,
    GatewayErrorKind.PERMISSION_DENIED: VerificationReason.INSUFFICIENT_PERMISSIONS,
    GatewayErrorKind.UPSTREAM_TIMEOUT: VerificationReason.UPSTREAM_UNREACHABLE,
    GatewayErrorKind.UPSTREAM_UNREACHABLE: VerificationReason.UPSTREAM_UNREACHABLE,
    GatewayErrorKind.SIGNATURE_GENERATION_ERROR: VerificationReason.MALFORMED_KEY,
}


def _upstream_message(body: Any) -> Optional[str]:
    """Pull a human-readable message out of an upstream error body.

    The upstream answers either ``{"message": ...}`` or
    ``{"error": {"code": ..., "message": ...}}``.
    """
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, str) and message:
        return message
    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def translate_status(status_code: int, body: Any = None) -> GatewayFailure:
    """Translate a non-2xx upstream response into a gateway failure.

    Args:
        status_code: Upstream HTTP status.
        body: Decoded upstream body, if any.

    Returns:
        A GatewayFailure. The upstream status is always preserved; the
        upstream message is only passed through for invalid requests.
    """
    kind = STATUS_KINDS.get(status_code, GatewayErrorKind.UPSTREAM_ERROR)
    message = None
    if kind is GatewayErrorKind.INVALID_REQUEST:
        message = _upstream_message(body)
    return GatewayFailure(kind=kind, status_code=status_code, message=message)


def translate_transport(failure: TransportFailure) -> GatewayFailure:
    """Translate a transport-level failure into a gateway failure."""
    return GatewayFailure(kind=TRANSPORT_KINDS[failure])


def signing_failure() -> GatewayFailure:
    """Gateway failure for a local signing exception."""
    return GatewayFailure(kind=GatewayErrorKind.SIGNATURE_GENERATION_ERROR)


def verification_reason(failure: GatewayFailure) -> VerificationReason:
    """Map a gateway failure onto the connection-check reason vocabulary."""
    return VERIFICATION_REASONS.get(failure.kind, VerificationReason.UPSTREAM_ERROR)
