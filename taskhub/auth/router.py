"""
Authentication and user routers.

- /api/v1/auth: login, registration
- /api/v1/users: profile, password change, account deletion
"""
from fastapi import APIRouter, Depends, Response, status

from taskhub.auth.middleware import AuthenticatedRoute, AuthenticatedUser, get_current_user
from taskhub.auth.users import (
    LoginRequest,
    PasswordUpdateRequest,
    RegisterRequest,
    UserDeletionRequest,
)
from taskhub.base_microservice import ApiResponse
from taskhub.container import ServiceContainer, get_container
from taskhub.validation import ensure_same_user

router = APIRouter(tags=["auth"])
users_router = APIRouter(tags=["users"], route_class=AuthenticatedRoute)


# --- Basic Auth Endpoints ---

@router.post("/login")
async def login(
    login_data: LoginRequest,
    container: ServiceContainer = Depends(get_container),
):
    """Check credentials and return the user with a fresh token."""
    result = await container.auth_service.login(login_data)
    return ApiResponse(data=result.to_json(), status_code=status.HTTP_200_OK)


@router.post("/register")
async def register(
    user_data: RegisterRequest,
    container: ServiceContainer = Depends(get_container),
):
    """Create an account and return it with a token."""
    result = await container.auth_service.register(user_data)
    return ApiResponse(data=result.to_json(), status_code=status.HTTP_201_CREATED)


# --- User Endpoints ---

@users_router.get("/{user_id}")
async def get_user(
    user_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    ensure_same_user(current_user.user_id, user_id)
    user = await container.user_service.get_user(user_id)
    return ApiResponse(data=user.to_json())


@users_router.put("/{user_id}/password")
async def update_password(
    user_id: int,
    update_data: PasswordUpdateRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    ensure_same_user(current_user.user_id, user_id)
    user = await container.user_service.update_password(user_id, update_data)
    return ApiResponse(data=user.to_json())


@users_router.post("/{user_id}/delete")
async def delete_user(
    user_id: int,
    deletion_data: UserDeletionRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    ensure_same_user(current_user.user_id, user_id)
    await container.user_service.delete_user(user_id, deletion_data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
