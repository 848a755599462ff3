"""User and authentication schemas for API validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserRegister(BaseModel):
    """Schema for self-registration."""
    email: EmailStr
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: str = Field(min_length=6, max_length=100)


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str = Field(min_length=1)


class UserCreate(BaseModel):
    """Schema for creating a user from the directory."""
    email: EmailStr
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: str = Field(min_length=6, max_length=100)
    role: Optional[str] = Field(None, min_length=1, max_length=50)


class UserUpdate(BaseModel):
    """Partial patch; unset fields are left untouched."""
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=6, max_length=100)
    role: Optional[str] = Field(None, min_length=1, max_length=50)


class RegisterResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None

    class Config:
        from_attributes = True


class UserPublic(BaseModel):
    """Safe projection of a user; never includes the password hash."""
    id: str
    email: str
    name: Optional[str] = None
    role: str

    class Config:
        from_attributes = True


class UserResponse(UserPublic):
    created_at: datetime
    updated_at: datetime


class LoginResponse(BaseModel):
    user: UserPublic
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenPayload(BaseModel):
    """Claims carried by a verified access token."""
    sub: str  # user_id
    email: str
    role: str
    type: str
    exp: datetime


class OkResponse(BaseModel):
    ok: bool = True
