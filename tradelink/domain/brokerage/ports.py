"""
Port interfaces (ABCs) for the brokerage bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from tradelink.domain.brokerage.entities import CredentialPair, GatewayResult


class CredentialStore(ABC):
    """Port for storing a principal's brokerage credential pair.

    Lookups are by principal id and writes are atomic per principal.
    The storage technology is an adapter concern.
    """

    @abstractmethod
    def get_credentials(self, principal_id: str) -> Optional[CredentialPair]:
        """Return the stored pair, or None when the principal is not connected."""
        raise NotImplementedError

    @abstractmethod
    def set_credentials(self, principal_id: str, pair: CredentialPair) -> None:
        """Store (or replace) the pair for a principal."""
        raise NotImplementedError

    @abstractmethod
    def clear_credentials(self, principal_id: str) -> None:
        """Remove any stored pair for a principal. Idempotent."""
        raise NotImplementedError


class RequestSigner(ABC):
    """Port for producing request signatures."""

    @abstractmethod
    def sign(
        self, method: str, path: str, timestamp_ms: int, private_key: str
    ) -> str:
        """Return a base64 signature over the canonical request string.

        Raises:
            SignatureGenerationError: If the key material is unusable.
        """
        raise NotImplementedError


class TradingApiPort(ABC):
    """Port for calling the upstream trading API.

    Implementations never raise for upstream or transport failures;
    every outcome comes back as a GatewayResult.
    """

    @abstractmethod
    async def call(
        self,
        method: str,
        path: str,
        credentials: CredentialPair,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> GatewayResult:
        """Issue a signed request against an operation path.

        Args:
            method: HTTP method.
            path: Operation path relative to the versioned base, e.g.
                ``/portfolio/balance``.
            credentials: Pair used to sign this single call.
            params: Optional query parameters (never signed).
            json: Optional JSON body for POST requests.
        """
        raise NotImplementedError

    @abstractmethod
    async def call_public(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> GatewayResult:
        """Issue an unsigned request against a public endpoint."""
        raise NotImplementedError
