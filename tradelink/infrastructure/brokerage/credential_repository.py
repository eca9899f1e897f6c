"""
Adapter: brokerage credential persistence.

Implements the CredentialStore port twice:

- ``SqlCredentialRepository`` keeps one row per principal in the
  ``brokerage_credentials`` table through SQLAlchemy Core. Writes are a
  single upsert, so they are atomic per principal.
- ``InMemoryCredentialRepository`` keeps pairs in a dict. Used when no
  database DSN is configured and in tests.

Private keys go through a CredentialCipher before they touch storage.
"""

import logging
import threading
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from tradelink.domain.brokerage.entities import CredentialPair
from tradelink.domain.brokerage.ports import CredentialStore
from tradelink.infrastructure.brokerage.key_cipher import CredentialCipher

logger = logging.getLogger(__name__)

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS brokerage_credentials (
        principal_id  VARCHAR(64)  PRIMARY KEY,
        access_key_id VARCHAR(255) NOT NULL,
        private_key   TEXT         NOT NULL,
        updated_at    TIMESTAMP    DEFAULT CURRENT_TIMESTAMP
    )
"""


class SqlCredentialRepository(CredentialStore):
    """Persists credential pairs to a relational database.

    Implements the CredentialStore port defined in the domain layer.
    """

    def __init__(self, engine: Engine, cipher: CredentialCipher) -> None:
        self._engine = engine
        self._cipher = cipher

    def ensure_table(self) -> None:
        """Create the credentials table if it does not exist (idempotent)."""
        with self._engine.begin() as conn:
            conn.execute(text(CREATE_TABLE_SQL))
        logger.info("brokerage_credentials table verified/created.")

    def get_credentials(self, principal_id: str) -> Optional[CredentialPair]:
        """Return the stored pair for a principal, or None.

        Args:
            principal_id: Principal identifier.

        Returns:
            CredentialPair with the decrypted private key, or None.
        """
        query = text(
            """
            SELECT access_key_id, private_key
            FROM brokerage_credentials
            WHERE principal_id = :principal_id
            """
        )

        with self._engine.connect() as conn:
            row = conn.execute(query, {"principal_id": principal_id}).fetchone()

        if row is None:
            return None
        return CredentialPair(
            access_key_id=row.access_key_id,
            private_key=self._cipher.decrypt(row.private_key),
        )

    def set_credentials(self, principal_id: str, pair: CredentialPair) -> None:
        """Insert or replace the pair for a principal in one statement."""
        query = text(
            """
            INSERT INTO brokerage_credentials
                (principal_id, access_key_id, private_key, updated_at)
            VALUES
                (:principal_id, :access_key_id, :private_key, CURRENT_TIMESTAMP)
            ON CONFLICT (principal_id) DO UPDATE SET
                access_key_id = excluded.access_key_id,
                private_key   = excluded.private_key,
                updated_at    = CURRENT_TIMESTAMP
            """
        )

        with self._engine.begin() as conn:
            conn.execute(
                query,
                {
                    "principal_id": principal_id,
                    "access_key_id": pair.access_key_id,
                    "private_key": self._cipher.encrypt(pair.private_key),
                },
            )

        logger.info("Stored brokerage credentials for principal=%s.", principal_id)

    def clear_credentials(self, principal_id: str) -> None:
        """Delete the pair for a principal. No-op when none is stored."""
        query = text(
            "DELETE FROM brokerage_credentials WHERE principal_id = :principal_id"
        )

        with self._engine.begin() as conn:
            conn.execute(query, {"principal_id": principal_id})

        logger.info("Cleared brokerage credentials for principal=%s.", principal_id)


class InMemoryCredentialRepository(CredentialStore):
    """Process-local credential store."""

    def __init__(self, cipher: Optional[CredentialCipher] = None) -> None:
        self._cipher = cipher
        self._rows: dict[str, tuple[str, str]] = {}
        self._lock = threading.Lock()

    def get_credentials(self, principal_id: str) -> Optional[CredentialPair]:
        with self._lock:
            row = self._rows.get(principal_id)
        if row is None:
            return None
        access_key_id, private_key = row
        if self._cipher is not None:
            private_key = self._cipher.decrypt(private_key)
        return CredentialPair(access_key_id=access_key_id, private_key=private_key)

    def set_credentials(self, principal_id: str, pair: CredentialPair) -> None:
        private_key = pair.private_key
        if self._cipher is not None:
            private_key = self._cipher.encrypt(private_key)
        with self._lock:
            self._rows[principal_id] = (pair.access_key_id, private_key)

    def clear_credentials(self, principal_id: str) -> None:
        with self._lock:
            self._rows.pop(principal_id, None)
