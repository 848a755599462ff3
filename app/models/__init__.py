"""Database models."""

from app.models.user import User
from app.models.refresh_token import RefreshToken
from app.models.vehicle import Vehicle, VehicleStatus, VehicleStatusType
from app.models.trip import Trip

__all__ = [
    "User",
    "RefreshToken",
    "Vehicle",
    "VehicleStatus",
    "VehicleStatusType",
    "Trip",
]
