"""
Secure HTTP headers middleware.

Adds security-related headers to every response. Responses from the
brokerage routes carry balances and key previews, so they are also
marked non-cacheable.

No business logic. Pure cross-cutting concern.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

SECURE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains",
}

NO_STORE_PREFIXES = ("/api/v1/brokerage",)

# Swagger UI pulls its assets from a CDN
DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds secure HTTP headers to every response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        path = request.url.path

        for header_name, header_value in SECURE_HEADERS.items():
            if header_name == "Content-Security-Policy" and path.startswith(DOCS_PATHS):
                continue
            response.headers[header_name] = header_value

        if path.startswith(NO_STORE_PREFIXES):
            response.headers["Cache-Control"] = "no-store"
        return response
