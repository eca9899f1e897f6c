"""
At-rest encryption for stored private keys.

Uses Fernet (AES-128-CBC + HMAC-SHA256) from ``cryptography``. When no
encryption key is configured the cipher is a pass-through and a warning
is logged once at construction.
"""

import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from tradelink.domain.brokerage.errors import CredentialStoreError

logger = logging.getLogger(__name__)


class CredentialCipher:
    """Encrypts and decrypts private key material for storage.

    Args:
        encryption_key: urlsafe-base64 32-byte Fernet key, or None to
            store plaintext (development only).
    """

    def __init__(self, encryption_key: Optional[str] = None) -> None:
        self._fernet: Optional[Fernet] = None
        if encryption_key:
            try:
                self._fernet = Fernet(encryption_key.encode("utf-8"))
            except (ValueError, TypeError) as exc:
                raise CredentialStoreError("invalid encryption key") from exc
        else:
            logger.warning(
                "No credential encryption key configured; private keys are "
                "stored unencrypted."
            )

    @property
    def enabled(self) -> bool:
        return self._fernet is not None

    def encrypt(self, plaintext: str) -> str:
        if self._fernet is None:
            return plaintext
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt stored key material.

        Raises:
            CredentialStoreError: If the value was encrypted under another key
                or is corrupt.
        """
        if self._fernet is None:
            return ciphertext
        try:
            return self._fernet.decrypt(ciphertext.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError) as exc:
            raise CredentialStoreError("stored key cannot be decrypted") from exc


def generate_encryption_key() -> str:
    """Return a fresh Fernet key suitable for CREDENTIAL_ENCRYPTION_KEY."""
    return Fernet.generate_key().decode("ascii")
