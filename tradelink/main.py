"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (brokerage, markets, health)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration

No business logic belongs here.
"""

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from tradelink.core.config import settings
from tradelink.interfaces.brokerage.router import markets_router
from tradelink.interfaces.brokerage.router import router as brokerage_router
from tradelink.interfaces.health import router as health_router
from tradelink.shared.errors.handlers import register_error_handlers
from tradelink.shared.logging import configure_logging
from tradelink.shared.security.headers import SecurityHeadersMiddleware
from tradelink.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(brokerage_router, prefix="/api/v1")
    app.include_router(markets_router, prefix="/api/v1")

    return app


app = create_app()
