"""Tests for the authentication service against a real SQLite session."""

from datetime import timedelta

import pytest
from sqlalchemy import delete, select

from app.core.exceptions import Conflict, Fatal, Unauthorized
from app.core.security import TokenSigner, verify_password
from app.db.session import utcnow
from app.models.refresh_token import RefreshToken
from app.models.user import User
from app.services.auth_service import (
    FAKE_HASHED_PASSWORD,
    INVALID_CREDENTIALS,
    AuthService,
)


@pytest.fixture
def auth(db, settings):
    return AuthService(db, settings)


async def _stored_token(db, token: str) -> RefreshToken:
    result = await db.execute(select(RefreshToken).where(RefreshToken.token == token))
    return result.scalar_one()


# ============================================
# Registration
# ============================================

class TestRegister:
    @pytest.mark.asyncio
    async def test_stores_hash_not_plaintext(self, auth, settings):
        user = await auth.register("A@B.com", "Ann", "secret1")

        assert user.id
        assert user.email == "a@b.com"
        assert user.role == settings.default_role
        assert user.password_hash != "secret1"
        assert verify_password("secret1", user.password_hash)

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, auth):
        await auth.register("a@b.com", None, "secret1")

        with pytest.raises(Conflict) as exc_info:
            await auth.register("a@b.com", "Other", "secret2")
        assert exc_info.value.field == "email"


# ============================================
# Login
# ============================================

class TestLogin:
    @pytest.mark.asyncio
    async def test_access_token_subject_is_user_id(self, auth, settings):
        user = await auth.register("a@b.com", None, "secret1")
        result = await auth.login("a@b.com", "secret1")

        payload = TokenSigner(settings).decode_access_token(result.access_token)
        assert payload["sub"] == user.id
        assert payload["email"] == "a@b.com"
        assert payload["role"] == user.role
        assert result.user.id == user.id

    @pytest.mark.asyncio
    async def test_refresh_row_is_persisted(self, auth, db):
        user = await auth.register("a@b.com", None, "secret1")
        result = await auth.login("a@b.com", "secret1")

        row = await _stored_token(db, result.refresh_token)
        assert row.user_id == user.id
        assert row.revoked_at is None
        assert row.expires_at > utcnow() + timedelta(days=6)

    @pytest.mark.asyncio
    async def test_two_logins_create_independent_tokens(self, auth, db):
        await auth.register("a@b.com", None, "secret1")
        first = await auth.login("a@b.com", "secret1")
        second = await auth.login("a@b.com", "secret1")

        assert first.refresh_token != second.refresh_token
        rows = (await db.execute(select(RefreshToken))).scalars().all()
        assert len(rows) == 2

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, auth):
        await auth.register("a@b.com", None, "secret1")

        with pytest.raises(Unauthorized) as wrong_password:
            await auth.login("a@b.com", "nope-nope")
        with pytest.raises(Unauthorized) as unknown_email:
            await auth.login("ghost@b.com", "secret1")

        assert wrong_password.value.message == unknown_email.value.message == INVALID_CREDENTIALS

    def test_fake_hash_exists_for_constant_time_path(self):
        assert FAKE_HASHED_PASSWORD
        assert FAKE_HASHED_PASSWORD.startswith("$2")


# ============================================
# Refresh / Logout
# ============================================

class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh_issues_access_token(self, auth, settings):
        user = await auth.register("a@b.com", None, "secret1")
        login = await auth.login("a@b.com", "secret1")

        access = await auth.refresh(login.refresh_token)

        assert TokenSigner(settings).decode_access_token(access)["sub"] == user.id

    @pytest.mark.asyncio
    async def test_refresh_does_not_rotate(self, auth, db):
        """The same refresh token keeps working across repeated calls."""
        await auth.register("a@b.com", None, "secret1")
        login = await auth.login("a@b.com", "secret1")

        assert await auth.refresh(login.refresh_token)
        assert await auth.refresh(login.refresh_token)

        row = await _stored_token(db, login.refresh_token)
        assert row.revoked_at is None

    @pytest.mark.asyncio
    async def test_revoked_token_never_refreshes_again(self, auth):
        await auth.register("a@b.com", None, "secret1")
        login = await auth.login("a@b.com", "secret1")

        assert await auth.logout(login.refresh_token) is True
        for _ in range(3):
            with pytest.raises(Unauthorized):
                await auth.refresh(login.refresh_token)

    @pytest.mark.asyncio
    async def test_expired_row_fails_even_if_never_revoked(self, auth, db):
        await auth.register("a@b.com", None, "secret1")
        login = await auth.login("a@b.com", "secret1")

        row = await _stored_token(db, login.refresh_token)
        row.expires_at = utcnow() - timedelta(seconds=1)
        await db.commit()

        with pytest.raises(Unauthorized):
            await auth.refresh(login.refresh_token)

    @pytest.mark.asyncio
    async def test_unknown_or_wrong_kind_token_is_rejected(self, auth):
        await auth.register("a@b.com", None, "secret1")
        login = await auth.login("a@b.com", "secret1")

        with pytest.raises(Unauthorized):
            await auth.refresh(login.access_token)
        with pytest.raises(Unauthorized):
            await auth.refresh(auth.signer.create_refresh_token("someone").token)

    @pytest.mark.asyncio
    async def test_vanished_user_is_fatal(self, auth, db):
        user = await auth.register("a@b.com", None, "secret1")
        login = await auth.login("a@b.com", "secret1")

        # Core delete skips ORM cascades, leaving the token row orphaned
        await db.execute(delete(User).where(User.id == user.id))
        await db.commit()
        db.expunge_all()

        with pytest.raises(Fatal):
            await auth.refresh(login.refresh_token)


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_is_idempotent(self, auth):
        await auth.register("a@b.com", None, "secret1")
        login = await auth.login("a@b.com", "secret1")

        assert await auth.logout(login.refresh_token) is True
        assert await auth.logout(login.refresh_token) is False

    @pytest.mark.asyncio
    async def test_missing_token_is_not_an_error(self, auth):
        assert await auth.logout("does-not-exist") is False

    @pytest.mark.asyncio
    async def test_revoke_all(self, auth):
        user = await auth.register("a@b.com", None, "secret1")
        first = await auth.login("a@b.com", "secret1")
        second = await auth.login("a@b.com", "secret1")

        assert await auth.revoke_all(user.id) == 2
        for token in (first.refresh_token, second.refresh_token):
            with pytest.raises(Unauthorized):
                await auth.refresh(token)
