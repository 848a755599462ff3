"""Tests for password hashing and token signing."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.core.config import Settings
from app.core.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    TokenSigner,
    hash_password,
    verify_password,
)


@pytest.fixture
def signer():
    return TokenSigner(
        Settings(
            jwt_access_secret="access-secret",
            jwt_refresh_secret="refresh-secret",
            access_token_expire_minutes=15,
            refresh_token_expire_days=7,
        )
    )


class TestPasswordHashing:
    def test_hash_is_not_plaintext_and_verifies(self):
        """Test password hashing and verification."""
        password = "securePassword123!"
        hashed = hash_password(password)

        assert hashed != password
        assert verify_password(password, hashed) is True
        assert verify_password("wrongPassword", hashed) is False

    def test_hash_is_salted(self):
        assert hash_password("same") != hash_password("same")


class TestTokenSigner:
    def test_access_token_round_trip(self, signer):
        issued = signer.create_access_token("u1", "a@b.com", "user")
        payload = signer.decode_access_token(issued.token)

        assert payload is not None
        assert payload["sub"] == "u1"
        assert payload["email"] == "a@b.com"
        assert payload["role"] == "user"
        assert payload["type"] == ACCESS_TOKEN_TYPE
        assert payload["jti"] == issued.jti

    def test_refresh_token_carries_only_subject(self, signer):
        issued = signer.create_refresh_token("u1")
        payload = signer.decode_refresh_token(issued.token)

        assert payload["sub"] == "u1"
        assert payload["type"] == REFRESH_TOKEN_TYPE
        assert "email" not in payload

    def test_kinds_are_not_interchangeable(self, signer):
        """A refresh token is rejected by the access verifier and vice versa."""
        access = signer.create_access_token("u1", "a@b.com", "user").token
        refresh = signer.create_refresh_token("u1").token

        assert signer.decode_access_token(refresh) is None
        assert signer.decode_refresh_token(access) is None

    def test_type_claim_is_checked_even_with_matching_secret(self):
        settings = Settings(jwt_access_secret="shared", jwt_refresh_secret="shared")
        signer = TokenSigner(settings)
        refresh = signer.create_refresh_token("u1").token

        assert signer.decode_access_token(refresh) is None

    def test_expired_token_is_rejected(self, signer):
        past = datetime.now(timezone.utc) - timedelta(minutes=5)
        token = jwt.encode(
            {"sub": "u1", "email": "a@b.com", "role": "user", "type": "access", "exp": past},
            "access-secret",
            algorithm="HS256",
        )
        assert signer.decode_access_token(token) is None

    def test_foreign_signature_is_rejected(self, signer):
        future = datetime.now(timezone.utc) + timedelta(minutes=5)
        forged = jwt.encode(
            {"sub": "u1", "email": "a@b.com", "role": "admin", "type": "access", "exp": future},
            "some-other-secret",
            algorithm="HS256",
        )
        assert signer.decode_access_token(forged) is None
        assert signer.decode_access_token("not-a-jwt") is None

    def test_expiry_matches_settings(self, signer):
        issued = signer.create_refresh_token("u1")
        now = datetime.now(timezone.utc).replace(tzinfo=None)

        assert timedelta(days=6, hours=23) < issued.expires_at - now <= timedelta(days=7)
        assert signer.access_expires_in == 15 * 60

    def test_two_tokens_for_same_user_differ(self, signer):
        """Each token gets its own jti, so tokens issued in the same second are unique."""
        assert signer.create_refresh_token("u1").token != signer.create_refresh_token("u1").token
