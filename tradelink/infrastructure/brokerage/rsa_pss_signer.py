"""
Adapter: RSA-PSS request signer.

Implements the RequestSigner port with the ``cryptography`` package.
Signs ``timestamp + METHOD + path`` with RSA-PSS over SHA-256, MGF1-SHA256
and a salt as long as the digest, then base64-encodes the result.
"""

import base64
import logging
from functools import lru_cache

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from tradelink.domain.brokerage.canonical import canonical_string, normalize_private_key
from tradelink.domain.brokerage.errors import SignatureGenerationError
from tradelink.domain.brokerage.ports import RequestSigner

logger = logging.getLogger(__name__)

KEY_CACHE_SIZE = 128

PSS_PADDING = padding.PSS(
    mgf=padding.MGF1(hashes.SHA256()),
    salt_length=padding.PSS.DIGEST_LENGTH,
)


@lru_cache(maxsize=KEY_CACHE_SIZE)
def _load_rsa_key(pem: str) -> rsa.RSAPrivateKey:
    """Parse a PEM private key, caching parsed key objects (never signatures)."""
    try:
        key = serialization.load_pem_private_key(pem.encode("utf-8"), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise SignatureGenerationError("Private key could not be parsed") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise SignatureGenerationError("Private key is not an RSA key")
    return key


def sign(method: str, path: str, timestamp_ms: int, private_key: str) -> str:
    """Sign one request and return the base64 signature.

    Args:
        method: HTTP method, any case.
        path: Full versioned path; any query string is ignored.
        timestamp_ms: Milliseconds since epoch sent alongside the signature.
        private_key: PEM document or bare base64 RSA key material.

    Returns:
        Base64-encoded RSA-PSS-SHA256 signature.

    Raises:
        SignatureGenerationError: If the key material is empty or unusable.
    """
    if not private_key or not private_key.strip():
        raise SignatureGenerationError("Private key is empty")

    key = _load_rsa_key(normalize_private_key(private_key))
    message = canonical_string(method, path, timestamp_ms).encode("utf-8")
    try:
        signature = key.sign(message, PSS_PADDING, hashes.SHA256())
    except ValueError as exc:
        # keys too small for a digest-length PSS salt
        raise SignatureGenerationError("Private key cannot sign this request") from exc
    return base64.b64encode(signature).decode("ascii")


class RsaPssSigner(RequestSigner):
    """Concrete RequestSigner backed by RSA-PSS-SHA256."""

    def sign(
        self, method: str, path: str, timestamp_ms: int, private_key: str
    ) -> str:
        return sign(method, path, timestamp_ms, private_key)
