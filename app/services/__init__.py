"""Services for business logic."""

from app.services.auth_service import AuthService, LoginResult
from app.services.user_service import UserService
from app.services.vehicle_service import VehicleService, StatusResult
from app.services.report_service import ReportService

__all__ = [
    "AuthService",
    "LoginResult",
    "UserService",
    "VehicleService",
    "StatusResult",
    "ReportService",
]
