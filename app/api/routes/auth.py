"""Authentication endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Request, Response, status

from app.core.config import Settings
from app.core.dependencies import AppSettings, AuthServiceDep, CurrentUser
from app.core.exceptions import Unauthorized
from app.schemas.user import (
    AccessTokenResponse,
    LoginResponse,
    OkResponse,
    RefreshRequest,
    RegisterResponse,
    TokenPayload,
    UserLogin,
    UserPublic,
    UserRegister,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _cookie_options(settings: Settings) -> dict:
    # set_cookie and delete_cookie must agree on path/secure/samesite
    return {
        "httponly": True,
        "path": "/",
        "secure": settings.cookie_secure,
        "samesite": settings.cookie_samesite,
    }


# ─────────────────────────────────────────────
# Register
# ─────────────────────────────────────────────

@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(body: UserRegister, auth: AuthServiceDep):
    """
    Register a new user.
    Returns the public fields of the created account.
    """
    return await auth.register(body.email, body.name, body.password)


# ─────────────────────────────────────────────
# Login
# ─────────────────────────────────────────────

@router.post("/login", response_model=LoginResponse)
async def login(body: UserLogin, response: Response, auth: AuthServiceDep, settings: AppSettings):
    """
    Authenticate a user.

    - Returns the access token in the body.
    - Sets the refresh token as an HttpOnly cookie.
    """
    result = await auth.login(body.email, body.password)

    response.set_cookie(
        settings.refresh_cookie_name,
        result.refresh_token,
        max_age=settings.refresh_token_max_age,
        **_cookie_options(settings),
    )

    return LoginResponse(
        user=UserPublic.model_validate(result.user),
        access_token=result.access_token,
        expires_in=auth.signer.access_expires_in,
    )


# ─────────────────────────────────────────────
# Refresh Token (no rotation)
# ─────────────────────────────────────────────

@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh_token(
    request: Request,
    auth: AuthServiceDep,
    settings: AppSettings,
    body: Optional[RefreshRequest] = None,
):
    """
    Exchange the refresh cookie for a new access token.
    The refresh token itself is left unchanged.
    """
    token = request.cookies.get(settings.refresh_cookie_name) or (body.refresh_token if body else None)
    if not token:
        logger.debug("Refresh requested without a token")
        raise Unauthorized("No refresh token")

    access_token = await auth.refresh(token)
    return AccessTokenResponse(
        access_token=access_token,
        expires_in=auth.signer.access_expires_in,
    )


# ─────────────────────────────────────────────
# Logout
# ─────────────────────────────────────────────

@router.post("/logout", response_model=OkResponse)
async def logout(request: Request, response: Response, auth: AuthServiceDep, settings: AppSettings):
    """Revoke the refresh token and clear both auth cookies."""
    token = request.cookies.get(settings.refresh_cookie_name)
    if token:
        await auth.logout(token)

    options = _cookie_options(settings)
    response.delete_cookie(settings.refresh_cookie_name, **options)
    response.delete_cookie(settings.access_cookie_name, **options)
    return OkResponse()


# ─────────────────────────────────────────────
# Current User
# ─────────────────────────────────────────────

@router.get("/me", response_model=TokenPayload)
async def read_current_user(current_user: CurrentUser):
    """Return the claims of the presented access token."""
    return current_user
