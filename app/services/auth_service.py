"""Authentication service: registration, login, refresh and logout."""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import Conflict, Fatal, Unauthorized
from app.core.security import TokenSigner, hash_password, pwd_context
from app.db.session import utcnow
from app.models.refresh_token import RefreshToken
from app.models.user import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH = "Invalid or expired refresh token"

# Precomputed fake hash to mitigate timing attacks
FAKE_HASHED_PASSWORD = pwd_context.hash(
    "this_is_a_fake_user_that_never_exists_2025"
)


def mask_email(email: str) -> str:
    return f"{email[:3]}***"


@dataclass
class LoginResult:
    user: User
    access_token: str
    refresh_token: str


class AuthService:
    """Issues, refreshes and revokes credentials for one database session."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self.signer = TokenSigner(settings)

    # ─── User Lookup ─────────────────────────────
    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        return await self.db.get(User, user_id)

    # ─── Registration ───────────────────────────
    async def register(self, email: str, name: Optional[str], password: str) -> User:
        email = email.strip().lower()
        if await self.get_user_by_email(email):
            raise Conflict("Email already registered", field="email")

        user = User(
            email=email,
            name=name,
            password_hash=hash_password(password),
            role=self.settings.default_role,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("Email already registered", field="email")

        logger.info(f"Registered user {user.id} ({mask_email(email)})")
        return user

    # ─── Secure Login (constant-time) ───────────
    async def login(self, email: str, password: str) -> LoginResult:
        user = await self.get_user_by_email(email)
        hashed_password = user.password_hash if user else FAKE_HASHED_PASSWORD
        password_correct = pwd_context.verify(password, hashed_password)

        if not user or not password_correct:
            logger.info(f"Failed login for {mask_email(email)}")
            raise Unauthorized(INVALID_CREDENTIALS)

        access = self.signer.create_access_token(user.id, user.email, user.role)
        refresh = self.signer.create_refresh_token(user.id)

        self.db.add(
            RefreshToken(
                token=refresh.token,
                user_id=user.id,
                expires_at=refresh.expires_at,
            )
        )
        await self.db.commit()

        logger.info(f"User {user.id} logged in")
        return LoginResult(user=user, access_token=access.token, refresh_token=refresh.token)

    # ─── Refresh Access Token (no rotation) ─────
    async def refresh(self, token: str) -> str:
        """
        Mint a new access token from a stored refresh token.

        The refresh token is not rotated: it stays usable until it expires or
        is revoked, so two concurrent refresh calls from one client both succeed.
        """
        if not self.signer.decode_refresh_token(token):
            raise Unauthorized(INVALID_REFRESH)

        result = await self.db.execute(
            select(RefreshToken)
            .where(RefreshToken.token == token)
            .execution_options(populate_existing=True)
        )
        record = result.scalar_one_or_none()
        if not record or not record.is_valid(utcnow()):
            logger.info("Rejected refresh: token missing, revoked or expired")
            raise Unauthorized(INVALID_REFRESH)

        user = await self.get_user_by_id(record.user_id)
        if user is None:
            logger.error(f"Refresh token {record.id} points at missing user {record.user_id}")
            raise Fatal(f"User {record.user_id} for refresh token vanished")

        return self.signer.create_access_token(user.id, user.email, user.role).token

    # ─── Logout Current Token ───────────────────
    async def logout(self, token: str) -> bool:
        """Revoke one refresh token. Returns False when nothing was revoked."""
        result = await self.db.execute(
            update(RefreshToken)
            .where(RefreshToken.token == token, RefreshToken.revoked_at.is_(None))
            .values(revoked_at=utcnow())
        )
        await self.db.commit()
        revoked = result.rowcount > 0
        if revoked:
            logger.info("Refresh token revoked")
        return revoked

    # ─── Logout All Devices ─────────────────────
    async def revoke_all(self, user_id: str) -> int:
        result = await self.db.execute(
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.revoked_at.is_(None))
            .values(revoked_at=utcnow())
        )
        await self.db.commit()
        return result.rowcount
