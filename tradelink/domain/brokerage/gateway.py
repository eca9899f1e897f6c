"""
Signed Request Gateway.

Resolves a principal's credentials and proxies one signed call to the
upstream API. Credentials are fetched from the store on every call so a
disconnect takes effect immediately.
"""

import logging
from typing import Any, Optional

from tradelink.domain.brokerage.entities import GatewayResult, HttpMethod
from tradelink.domain.brokerage.errors import CredentialsNotConfiguredError
from tradelink.domain.brokerage.ports import CredentialStore, TradingApiPort

logger = logging.getLogger(__name__)


class SignedRequestGateway:
    """Proxies authenticated requests on behalf of a principal."""

    def __init__(
        self, credential_store: CredentialStore, trading_api: TradingApiPort
    ) -> None:
        self._credential_store = credential_store
        self._trading_api = trading_api

    async def proxy_authenticated_get(
        self,
        principal_id: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> GatewayResult:
        """Issue a signed GET for a principal.

        Args:
            principal_id: Principal whose stored pair signs the call.
            path: Operation path relative to the versioned API base.
            params: Optional query parameters.

        Returns:
            The upstream payload or a translated failure.

        Raises:
            CredentialsNotConfiguredError: If the principal has no stored pair.
        """
        pair = self._credential_store.get_credentials(principal_id)
        if pair is None:
            raise CredentialsNotConfiguredError(principal_id)

        logger.debug("Proxying GET %s for principal=%s", path, principal_id)
        return await self._trading_api.call(
            HttpMethod.GET.value, path, pair, params=params
        )

    async def public_get(
        self, path: str, params: Optional[dict[str, Any]] = None
    ) -> GatewayResult:
        """Issue an unsigned GET against a public upstream endpoint."""
        return await self._trading_api.call_public(
            HttpMethod.GET.value, path, params=params
        )
