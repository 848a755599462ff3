"""Tests for the user directory service."""

import pytest
from sqlalchemy import select

from app.core.exceptions import Conflict, Unauthorized, ValidationError
from app.core.security import verify_password
from app.models.refresh_token import RefreshToken
from app.services.auth_service import AuthService
from app.services.user_service import UserService


@pytest.fixture
def users(db, settings):
    return UserService(db, settings)


class TestUserService:
    @pytest.mark.asyncio
    async def test_create_normalizes_email_and_defaults_role(self, users):
        user = await users.create(" Fleet.Admin@FleetCo.com ", "secret1", name="Fleet Admin")

        assert user.email == "fleet.admin@fleetco.com"
        assert user.role == "user"
        assert verify_password("secret1", user.password_hash)

    @pytest.mark.asyncio
    async def test_create_with_explicit_role(self, users):
        user = await users.create("boss@fleetco.com", "secret1", role="admin")
        assert user.role == "admin"

    @pytest.mark.asyncio
    async def test_create_duplicate_conflicts(self, users):
        await users.create("a@b.com", "secret1")

        with pytest.raises(Conflict) as exc_info:
            await users.create("A@B.com", "secret2")
        assert exc_info.value.to_dict() == {"detail": "Email already exists", "field": "email"}

    @pytest.mark.asyncio
    async def test_list_and_get(self, users):
        first = await users.create("a@b.com", "secret1")
        second = await users.create("c@d.com", "secret1")

        listed = await users.list()

        assert {u.id for u in listed} == {first.id, second.id}
        assert (await users.get(first.id)).email == "a@b.com"
        assert await users.get("missing") is None

    @pytest.mark.asyncio
    async def test_patch_touches_only_given_fields(self, users):
        user = await users.create("a@b.com", "secret1", name="Ann")
        old_hash = user.password_hash

        updated = await users.update(user.id, {"role": "admin"})

        assert updated.role == "admin"
        assert updated.name == "Ann"
        assert updated.email == "a@b.com"
        assert updated.password_hash == old_hash

    @pytest.mark.asyncio
    async def test_patch_can_clear_name(self, users):
        user = await users.create("a@b.com", "secret1", name="Ann")

        updated = await users.update(user.id, {"name": None})

        assert updated.name is None

    @pytest.mark.asyncio
    async def test_patch_email_to_taken_address_conflicts(self, users):
        await users.create("a@b.com", "secret1")
        other = await users.create("c@d.com", "secret1")

        with pytest.raises(Conflict):
            await users.update(other.id, {"email": "a@b.com"})

    @pytest.mark.asyncio
    async def test_patch_email_to_own_address_is_fine(self, users):
        user = await users.create("a@b.com", "secret1")

        updated = await users.update(user.id, {"email": "A@B.com"})

        assert updated.email == "a@b.com"

    @pytest.mark.asyncio
    async def test_patch_rejects_unknown_fields(self, users):
        user = await users.create("a@b.com", "secret1")

        with pytest.raises(ValidationError) as exc_info:
            await users.update(user.id, {"password_hash": "x"})
        assert exc_info.value.status_code == 400
        assert exc_info.value.field == "password_hash"

    @pytest.mark.asyncio
    async def test_patch_missing_user(self, users):
        assert await users.update("missing", {"name": "x"}) is None

    @pytest.mark.asyncio
    async def test_new_password_is_hashed_and_revokes_sessions(self, users, db, settings):
        """Changing the password logs the user out everywhere."""
        auth = AuthService(db, settings)
        user = await users.create("a@b.com", "secret1")
        login = await auth.login("a@b.com", "secret1")

        updated = await users.update(user.id, {"password": "brand-new-pass"})

        assert verify_password("brand-new-pass", updated.password_hash)
        assert not verify_password("secret1", updated.password_hash)

        revoked_at = (
            await db.execute(
                select(RefreshToken.revoked_at).where(RefreshToken.token == login.refresh_token)
            )
        ).scalar_one()
        assert revoked_at is not None
        with pytest.raises(Unauthorized):
            await auth.refresh(login.refresh_token)

    @pytest.mark.asyncio
    async def test_delete(self, users):
        user = await users.create("a@b.com", "secret1")

        assert await users.delete(user.id) is True
        assert await users.get(user.id) is None
        assert await users.delete(user.id) is False
