"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tradelink.domain.brokerage.entities import GatewayErrorKind
from tradelink.domain.brokerage.errors import (
    BrokerageDomainError,
    ConnectionVerificationError,
    CredentialsNotConfiguredError,
    CredentialStoreError,
    GatewayError,
    InvalidQueryError,
)
from tradelink.shared.security.principal import PrincipalAuthenticationError

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_401 = 401
HTTP_500 = 500

GATEWAY_RESPONSES: dict[GatewayErrorKind, tuple[int, str]] = {
    GatewayErrorKind.AUTHENTICATION_FAILED: (401, "Upstream authentication failed"),
    GatewayErrorKind.PERMISSION_DENIED: (403, "Credentials lack required permissions"),
    GatewayErrorKind.RESOURCE_NOT_FOUND: (404, "Resource not found"),
    GatewayErrorKind.INVALID_REQUEST: (400, "Invalid request parameters"),
    GatewayErrorKind.UPSTREAM_TIMEOUT: (504, "Upstream request timed out"),
    GatewayErrorKind.UPSTREAM_UNREACHABLE: (502, "Upstream unreachable"),
    GatewayErrorKind.SIGNATURE_GENERATION_ERROR: (400, "Request signing failed"),
    GatewayErrorKind.UPSTREAM_ERROR: (502, "Upstream error"),
}


def _error_response(
    status_code: int,
    error: str,
    detail: str | None = None,
    **extra: Optional[str],
) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    body.update({key: value for key, value in extra.items() if value is not None})
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(PrincipalAuthenticationError)
    async def handle_principal_authentication(
        _request: Request, exc: PrincipalAuthenticationError
    ) -> JSONResponse:
        """Handle missing or invalid bearer tokens."""
        response = _error_response(HTTP_401, exc.detail)
        response.headers["WWW-Authenticate"] = "Bearer"
        return response

    @app.exception_handler(CredentialsNotConfiguredError)
    async def handle_credentials_not_configured(
        _request: Request, exc: CredentialsNotConfiguredError
    ) -> JSONResponse:
        """Handle proxied calls for a principal with no stored pair."""
        logger.warning("Credentials not configured: %s", exc.principal_id)
        return _error_response(HTTP_401, "Brokerage credentials not configured")

    @app.exception_handler(ConnectionVerificationError)
    async def handle_connection_verification(
        _request: Request, exc: ConnectionVerificationError
    ) -> JSONResponse:
        """Handle a connect attempt whose check failed."""
        logger.warning("Connection verification failed: %s", exc.reason.value)
        return _error_response(
            HTTP_400,
            "Connection verification failed",
            exc.detail,
            reason=exc.reason.value,
        )

    @app.exception_handler(InvalidQueryError)
    async def handle_invalid_query(
        _request: Request, exc: InvalidQueryError
    ) -> JSONResponse:
        """Handle out-of-range proxied query parameters."""
        logger.warning("Invalid query: %s", exc.detail)
        return _error_response(HTTP_400, "Invalid request parameters", exc.detail)

    @app.exception_handler(GatewayError)
    async def handle_gateway_error(
        _request: Request, exc: GatewayError
    ) -> JSONResponse:
        """Handle every kind of the gateway error taxonomy."""
        status_code, error = GATEWAY_RESPONSES[exc.kind]
        logger.warning(
            "Gateway error: kind=%s, upstream_status=%s",
            exc.kind.value,
            exc.status_code,
        )
        detail = None
        if exc.kind is GatewayErrorKind.INVALID_REQUEST:
            detail = exc.upstream_message
        return _error_response(status_code, error, detail, kind=exc.kind.value)

    @app.exception_handler(CredentialStoreError)
    async def handle_credential_store(
        _request: Request, exc: CredentialStoreError
    ) -> JSONResponse:
        """Handle unreadable stored credentials."""
        logger.error("Credential store error: %s", exc.reason)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(BrokerageDomainError)
    async def handle_brokerage_domain(
        _request: Request, exc: BrokerageDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled brokerage domain errors."""
        logger.error("Unhandled brokerage domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
