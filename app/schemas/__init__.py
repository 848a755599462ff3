"""Pydantic schemas for API request/response validation."""

from app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserPublic,
    UserResponse,
    LoginResponse,
    AccessTokenResponse,
)
from app.schemas.vehicle import (
    VehicleResponse,
    VehicleListResponse,
    VehicleStatusResponse,
)

__all__ = [
    "UserCreate",
    "UserUpdate",
    "UserPublic",
    "UserResponse",
    "LoginResponse",
    "AccessTokenResponse",
    "VehicleResponse",
    "VehicleListResponse",
    "VehicleStatusResponse",
]
