"""Password hashing and JWT signing/verification."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import Settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ─── Password ────────────────────────────────
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


@dataclass
class IssuedToken:
    """A freshly signed token and the moment it stops being valid (naive UTC)."""
    token: str
    jti: str
    expires_at: datetime


class TokenSigner:
    """Signs and verifies access and refresh JWTs.

    The two kinds use separate secrets and carry a ``type`` claim, so a token of
    one kind is never accepted where the other is expected.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def _sign(self, claims: dict[str, Any], secret: str, expires_delta: timedelta, token_type: str) -> IssuedToken:
        now = datetime.now(timezone.utc)
        expire = now + expires_delta
        jti = str(uuid.uuid4())
        payload = {
            **claims,
            "jti": jti,
            "iat": now,
            "exp": expire,
            "type": token_type,
        }
        token = jwt.encode(payload, secret, algorithm=self.settings.jwt_algorithm)
        return IssuedToken(token=token, jti=jti, expires_at=expire.replace(tzinfo=None))

    def _decode(self, token: str, secret: str, token_type: str) -> Optional[dict]:
        try:
            payload = jwt.decode(token, secret, algorithms=[self.settings.jwt_algorithm])
        except JWTError:
            return None
        if payload.get("type") != token_type or not payload.get("sub"):
            return None
        return payload

    # ─── Access ──────────────────────────────────
    def create_access_token(self, user_id: str, email: str, role: str) -> IssuedToken:
        return self._sign(
            {"sub": str(user_id), "email": email, "role": role},
            self.settings.jwt_access_secret,
            timedelta(minutes=self.settings.access_token_expire_minutes),
            ACCESS_TOKEN_TYPE,
        )

    def decode_access_token(self, token: str) -> Optional[dict]:
        return self._decode(token, self.settings.jwt_access_secret, ACCESS_TOKEN_TYPE)

    # ─── Refresh ─────────────────────────────────
    def create_refresh_token(self, user_id: str) -> IssuedToken:
        return self._sign(
            {"sub": str(user_id)},
            self.settings.jwt_refresh_secret,
            timedelta(days=self.settings.refresh_token_expire_days),
            REFRESH_TOKEN_TYPE,
        )

    def decode_refresh_token(self, token: str) -> Optional[dict]:
        return self._decode(token, self.settings.jwt_refresh_secret, REFRESH_TOKEN_TYPE)

    @property
    def access_expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return self.settings.access_token_expire_minutes * 60
