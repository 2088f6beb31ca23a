"""
Users Router

Endpoints:
- GET /users - All users (admin)
- GET /users/me - Caller's profile
- PUT /users/{login}/role - Change a user's role (admin)
"""

from typing import List

from fastapi import APIRouter, Request

from bookstore.config import get_settings
from bookstore.dependencies import AdminUser, CurrentUser, DbSession
from bookstore.schemas import RoleUpdate, UserResponse
from bookstore.services import users
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        404: {"description": "User not found"},
    },
)


@router.get("/", response_model=List[UserResponse], summary="List users")
@limiter.limit(settings.rate_limit_default)
def list_users(request: Request, db: DbSession, current_user: AdminUser) -> List[UserResponse]:
    """All users by login, for the admin panel."""
    return [UserResponse.model_validate(u) for u in users.list_users(db)]


@router.get("/me", response_model=UserResponse, summary="Get your profile")
@limiter.limit(settings.rate_limit_default)
def get_me(request: Request, current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put(
    "/{login}/role",
    response_model=UserResponse,
    summary="Change a user's role",
)
@limiter.limit(settings.rate_limit_write)
def set_role(
    request: Request,
    login: str,
    role_data: RoleUpdate,
    db: DbSession,
    current_user: AdminUser,
) -> UserResponse:
    user = users.set_user_role(db, login, role_data.role)
    return UserResponse.model_validate(user)
