"""User management endpoints."""

from typing import List

from fastapi import APIRouter, Response, status

from app.core.dependencies import CurrentUser, UserServiceDep
from app.core.exceptions import NotFound
from app.schemas.user import UserCreate, UserResponse, UserUpdate

router = APIRouter()


@router.get("", response_model=List[UserResponse])
async def list_users(users: UserServiceDep, current_user: CurrentUser):
    """List all users."""
    return await users.list()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, users: UserServiceDep, current_user: CurrentUser):
    user = await users.get(user_id)
    if not user:
        raise NotFound("User not found")
    return user


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, users: UserServiceDep, current_user: CurrentUser):
    """Create a user. Role defaults to the configured default role."""
    return await users.create(
        email=body.email,
        password=body.password,
        name=body.name,
        role=body.role,
    )


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, body: UserUpdate, users: UserServiceDep, current_user: CurrentUser):
    """
    Update a user.

    Only the fields present in the request body are changed; a new password
    is hashed before storage.
    """
    user = await users.update(user_id, body.model_dump(exclude_unset=True))
    if not user:
        raise NotFound("User not found")
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, users: UserServiceDep, current_user: CurrentUser):
    if not await users.delete(user_id):
        raise NotFound("User not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
