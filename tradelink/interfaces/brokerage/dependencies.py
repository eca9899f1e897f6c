"""
Dependency injection for the brokerage bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the brokerage context.
"""

import logging
from functools import lru_cache

from fastapi import Depends
from sqlalchemy import create_engine

from tradelink.application.brokerage.connect_brokerage import ConnectBrokerageUseCase
from tradelink.application.brokerage.disconnect_brokerage import (
    DisconnectBrokerageUseCase,
)
from tradelink.application.brokerage.get_balance import GetBalanceUseCase
from tradelink.application.brokerage.get_connection_status import (
    GetConnectionStatusUseCase,
)
from tradelink.application.brokerage.get_market import GetMarketUseCase
from tradelink.application.brokerage.get_order_history import GetOrderHistoryUseCase
from tradelink.core.config import settings
from tradelink.domain.brokerage.connection_verifier import ConnectionVerifier
from tradelink.domain.brokerage.gateway import SignedRequestGateway
from tradelink.domain.brokerage.ports import CredentialStore, TradingApiPort
from tradelink.infrastructure.brokerage.credential_repository import (
    InMemoryCredentialRepository,
    SqlCredentialRepository,
)
from tradelink.infrastructure.brokerage.key_cipher import CredentialCipher
from tradelink.infrastructure.brokerage.rsa_pss_signer import RsaPssSigner
from tradelink.infrastructure.brokerage.upstream_client import UpstreamClient

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_credential_store() -> CredentialStore:
    """Build the process-wide credential store from application settings."""
    cipher = CredentialCipher(settings.credential_encryption_key)
    if not settings.credentials_dsn:
        logger.warning("CREDENTIALS_DSN not set; using in-memory credential store.")
        return InMemoryCredentialRepository(cipher=cipher)

    engine = create_engine(settings.credentials_dsn, pool_pre_ping=True)
    repository = SqlCredentialRepository(engine=engine, cipher=cipher)
    repository.ensure_table()
    return repository


@lru_cache(maxsize=1)
def get_trading_api() -> TradingApiPort:
    """Build the upstream client from application settings."""
    return UpstreamClient(
        base_url=settings.upstream_base_url,
        signer=RsaPssSigner(),
        timeout_seconds=settings.upstream_timeout_seconds,
        header_prefix=settings.upstream_header_prefix,
    )


def get_connection_verifier(
    trading_api: TradingApiPort = Depends(get_trading_api),
    credential_store: CredentialStore = Depends(get_credential_store),
) -> ConnectionVerifier:
    """Build the ConnectionVerifier domain service."""
    return ConnectionVerifier(
        trading_api=trading_api, credential_store=credential_store
    )


def get_signed_request_gateway(
    credential_store: CredentialStore = Depends(get_credential_store),
    trading_api: TradingApiPort = Depends(get_trading_api),
) -> SignedRequestGateway:
    """Build the SignedRequestGateway domain service."""
    return SignedRequestGateway(
        credential_store=credential_store, trading_api=trading_api
    )


def get_connect_brokerage_use_case(
    verifier: ConnectionVerifier = Depends(get_connection_verifier),
    credential_store: CredentialStore = Depends(get_credential_store),
) -> ConnectBrokerageUseCase:
    """Build ConnectBrokerageUseCase with its dependencies."""
    return ConnectBrokerageUseCase(
        verifier=verifier, credential_store=credential_store
    )


def get_connection_status_use_case(
    verifier: ConnectionVerifier = Depends(get_connection_verifier),
) -> GetConnectionStatusUseCase:
    """Build GetConnectionStatusUseCase with its dependencies."""
    return GetConnectionStatusUseCase(verifier=verifier)


def get_disconnect_brokerage_use_case(
    credential_store: CredentialStore = Depends(get_credential_store),
) -> DisconnectBrokerageUseCase:
    """Build DisconnectBrokerageUseCase with its dependencies."""
    return DisconnectBrokerageUseCase(credential_store=credential_store)


def get_balance_use_case(
    gateway: SignedRequestGateway = Depends(get_signed_request_gateway),
) -> GetBalanceUseCase:
    """Build GetBalanceUseCase with its dependencies."""
    return GetBalanceUseCase(gateway=gateway)


def get_order_history_use_case(
    gateway: SignedRequestGateway = Depends(get_signed_request_gateway),
) -> GetOrderHistoryUseCase:
    """Build GetOrderHistoryUseCase with its dependencies."""
    return GetOrderHistoryUseCase(gateway=gateway)


def get_market_use_case(
    gateway: SignedRequestGateway = Depends(get_signed_request_gateway),
) -> GetMarketUseCase:
    """Build GetMarketUseCase with its dependencies."""
    return GetMarketUseCase(gateway=gateway)
