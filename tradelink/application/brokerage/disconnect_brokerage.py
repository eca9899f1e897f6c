"""
Use case: Disconnect a principal from the upstream API.

Input: DisconnectBrokerageCommand (principal_id)
Output: DisconnectBrokerageResult
Side effects: Clears the stored pair unconditionally.
Failure cases: None.
"""

import logging

from tradelink.application.brokerage.dtos import (
    DisconnectBrokerageCommand,
    DisconnectBrokerageResult,
)
from tradelink.domain.brokerage.entities import ConnectionStatus
from tradelink.domain.brokerage.ports import CredentialStore

logger = logging.getLogger(__name__)


class DisconnectBrokerageUseCase:
    """Clears stored credentials without contacting the upstream."""

    def __init__(self, credential_store: CredentialStore) -> None:
        self._credential_store = credential_store

    def execute(self, command: DisconnectBrokerageCommand) -> DisconnectBrokerageResult:
        logger.info("Disconnecting principal=%s", command.principal_id)
        self._credential_store.clear_credentials(command.principal_id)
        return DisconnectBrokerageResult(status=ConnectionStatus.DISCONNECTED.value)
