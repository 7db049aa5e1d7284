"""Credential store and JWT helpers."""

from datetime import timedelta

import pytest
from fastapi import HTTPException

from core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestCredentialStore:
    def test_hash_is_salted_and_not_plaintext(self):
        h1 = hash_password("abc123")
        h2 = hash_password("abc123")

        assert h1 != h2
        assert "abc123" not in h1
        assert h1.startswith("$pbkdf2-sha256$")

    def test_verify_correct_and_wrong_password(self):
        hashed = hash_password("abc123")

        assert verify_password("abc123", hashed) is True
        assert verify_password("abc124", hashed) is False

    @pytest.mark.parametrize("bad_hash", [None, "", "not-a-hash", "$pbkdf2-sha256$x$y$z"])
    def test_malformed_hash_verifies_false(self, bad_hash):
        assert verify_password("abc123", bad_hash) is False

    def test_empty_password_never_verifies(self):
        assert verify_password("", hash_password("abc123")) is False


class TestAccessToken:
    def test_round_trip(self):
        token = create_access_token("alice", "u-1")
        payload = decode_access_token(token)

        assert payload["sub"] == "alice"
        assert payload["user_id"] == "u-1"
        assert "exp" in payload

    def test_expired_token_is_rejected(self):
        token = create_access_token("alice", "u-1", expires_delta=timedelta(seconds=-5))

        with pytest.raises(HTTPException) as exc:
            decode_access_token(token)
        assert exc.value.status_code == 401

    def test_garbage_token_is_rejected(self):
        with pytest.raises(HTTPException):
            decode_access_token("not.a.jwt")
