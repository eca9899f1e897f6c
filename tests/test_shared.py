"""
Tests for shared cross-cutting helpers: log redaction and bearer tokens.
"""

import logging

import pytest
from jose import jwt

from tradelink.shared.logging import REDACTED, PrivateKeyRedactingFilter
from tradelink.shared.security.principal import (
    PrincipalAuthenticationError,
    decode_principal_id,
)

SECRET = "test-secret"


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


class TestPrivateKeyRedactingFilter:
    """Tests for key masking in log records."""

    def test_pem_block_is_masked(self, pkcs1_pem) -> None:
        record = _record("Upstream rejected key %s for %s", pkcs1_pem, "user-42")
        assert PrivateKeyRedactingFilter().filter(record)

        message = record.getMessage()
        assert "-----BEGIN" not in message
        assert "PRIVATE KEY" not in message
        assert REDACTED in message
        assert message.endswith("for user-42")

    def test_bare_base64_key_is_masked(self, raw_key_body) -> None:
        record = _record("Signing failed for key %s", raw_key_body)
        PrivateKeyRedactingFilter().filter(record)

        message = record.getMessage()
        assert raw_key_body[:64] not in message
        assert message == f"Signing failed for key {REDACTED}"

    def test_short_base64_tokens_are_kept(self) -> None:
        record = _record("Signature %s accepted", "bm90IGEga2V5IGF0IGFsbA==")
        PrivateKeyRedactingFilter().filter(record)
        assert record.getMessage() == "Signature bm90IGEga2V5IGF0IGFsbA== accepted"

    def test_plain_message_is_untouched(self) -> None:
        record = _record("Fetching balance for principal=%s", "user-42")
        PrivateKeyRedactingFilter().filter(record)
        assert record.args == ("user-42",)
        assert record.getMessage() == "Fetching balance for principal=user-42"


class TestDecodePrincipalId:
    """Tests for bearer token verification."""

    def test_sub_claim(self) -> None:
        token = jwt.encode({"sub": "user-42"}, SECRET, algorithm="HS256")
        assert decode_principal_id(token, SECRET, "HS256") == "user-42"

    def test_numeric_user_id_claim(self) -> None:
        token = jwt.encode({"userId": 42}, SECRET, algorithm="HS256")
        assert decode_principal_id(token, SECRET, "HS256") == "42"

    def test_sub_wins_over_user_id(self) -> None:
        token = jwt.encode({"sub": "a", "userId": "b"}, SECRET, algorithm="HS256")
        assert decode_principal_id(token, SECRET, "HS256") == "a"

    @pytest.mark.parametrize("token", ["", "not.a.jwt", "abc"])
    def test_garbage_token(self, token: str) -> None:
        with pytest.raises(PrincipalAuthenticationError):
            decode_principal_id(token, SECRET, "HS256")

    def test_wrong_algorithm_rejected(self) -> None:
        token = jwt.encode({"sub": "user-42"}, SECRET, algorithm="HS512")
        with pytest.raises(PrincipalAuthenticationError):
            decode_principal_id(token, SECRET, "HS256")
