"""FastAPI dependencies: settings, sessions, services and the auth gate."""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import Unauthorized
from app.core.security import TokenSigner
from app.db.session import get_db
from app.schemas.user import TokenPayload
from app.services.auth_service import AuthService
from app.services.report_service import ReportService
from app.services.user_service import UserService
from app.services.vehicle_service import VehicleService

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_app_settings)]
DbSession = Annotated[AsyncSession, Depends(get_db)]


# ─── Services ────────────────────────────────
def get_auth_service(db: DbSession, settings: AppSettings) -> AuthService:
    return AuthService(db, settings)


def get_user_service(db: DbSession, settings: AppSettings) -> UserService:
    return UserService(db, settings)


def get_vehicle_service(db: DbSession) -> VehicleService:
    return VehicleService(db)


def get_report_service(db: DbSession) -> ReportService:
    return ReportService(db)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
VehicleServiceDep = Annotated[VehicleService, Depends(get_vehicle_service)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]


# ─── Auth gate ───────────────────────────────
async def get_current_user(
    request: Request,
    settings: AppSettings,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenPayload:
    """
    Verify the access token from the Authorization header, falling back to
    the access cookie. Stateless: no database lookup.
    """
    token = credentials.credentials if credentials else request.cookies.get(settings.access_cookie_name)
    if not token:
        raise Unauthorized("Not authenticated")

    payload = TokenSigner(settings).decode_access_token(token)
    if not payload:
        raise Unauthorized("Invalid token")

    try:
        return TokenPayload(**payload)
    except ValueError:
        raise Unauthorized("Invalid token")


CurrentUser = Annotated[TokenPayload, Depends(get_current_user)]
