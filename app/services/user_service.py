"""User directory service."""

import logging
from typing import Any, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import Conflict, ValidationError
from app.core.security import hash_password
from app.db.session import utcnow
from app.models.refresh_token import RefreshToken
from app.models.user import User

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("email", "name", "role", "password")


class UserService:
    """CRUD over users. Callers project results through ``UserPublic``."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings

    async def list(self) -> Sequence[User]:
        result = await self.db.execute(select(User).order_by(User.created_at, User.email))
        return result.scalars().all()

    async def get(self, user_id: str) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def _ensure_unique_email(self, email: str, exclude_user_id: Optional[str] = None) -> None:
        result = await self.db.execute(select(User.id).where(User.email == email))
        existing_id = result.scalar_one_or_none()
        if existing_id and existing_id != exclude_user_id:
            raise Conflict("Email already exists", field="email")

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("Email already exists", field="email")

    async def create(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        role: Optional[str] = None,
    ) -> User:
        email = email.strip().lower()
        await self._ensure_unique_email(email)

        user = User(
            email=email,
            name=name,
            password_hash=hash_password(password),
            role=role or self.settings.default_role,
        )
        self.db.add(user)
        await self._commit()
        logger.info(f"Created user {user.id} with role {user.role}")
        return user

    async def update(self, user_id: str, data: dict[str, Any]) -> Optional[User]:
        """
        Apply a partial patch.

        Only keys present in ``data`` are touched. A new password is hashed
        before storage and revokes the user's outstanding refresh tokens.
        """
        user = await self.get(user_id)
        if not user:
            return None

        unknown = set(data) - set(UPDATABLE_FIELDS)
        if unknown:
            fields = sorted(unknown)
            raise ValidationError(f"Unsupported user fields: {fields}", field=fields[0])

        if data.get("email") is not None:
            email = data["email"].strip().lower()
            await self._ensure_unique_email(email, exclude_user_id=user.id)
            user.email = email
        if "name" in data:
            user.name = data["name"]
        if data.get("role") is not None:
            user.role = data["role"]
        if data.get("password"):
            user.password_hash = hash_password(data["password"])
            await self.db.execute(
                update(RefreshToken)
                .where(RefreshToken.user_id == user.id, RefreshToken.revoked_at.is_(None))
                .values(revoked_at=utcnow())
            )

        await self._commit()
        await self.db.refresh(user)
        logger.info(f"Updated user {user.id} ({', '.join(sorted(data))})")
        return user

    async def delete(self, user_id: str) -> bool:
        user = await self.get(user_id)
        if not user:
            return False
        await self.db.delete(user)
        await self.db.commit()
        logger.info(f"Deleted user {user_id}")
        return True
