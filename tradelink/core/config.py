"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here. No scattered magic strings.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_upstream: Rate limit for endpoints that call the upstream API.
        upstream_base_url: Upstream host plus versioned base path. The base
            path is part of every signed string.
        upstream_timeout_seconds: Per-call upstream timeout.
        upstream_header_prefix: Prefix of the ACCESS-* auth header names.
        jwt_secret: Secret used to verify principal bearer tokens.
        jwt_algorithm: Algorithm used to verify principal bearer tokens.
        credentials_dsn: SQLAlchemy DSN for the credential store. When unset,
            credentials are kept in process memory.
        credential_encryption_key: Fernet key for encrypting private keys at rest.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "TradeLink"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_upstream: str = "20/minute"

    upstream_base_url: str = "https://demo-api.kalshi.co/trade-api/v2"
    upstream_timeout_seconds: float = 10.0
    upstream_header_prefix: str = "KALSHI-"

    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"

    credentials_dsn: Optional[str] = None
    credential_encryption_key: Optional[str] = None


settings = Settings()
