"""User management routes."""
from typing import List

from fastapi import APIRouter, Depends

from ...core.auth import AuthService
from ...core.security import Gate, get_auth_service
from ...core.sessions import Principal
from ...schemas.auth import ProfileUpdate, RoleUpdate, UserResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=List[UserResponse],
    dependencies=[Depends(Gate("users.getAll"))],
)
async def list_users(auth: AuthService = Depends(get_auth_service)):
    """List all users (admin only)."""
    users = await auth.list_users()
    return [UserResponse.model_validate(u) for u in users]


@router.patch("/me", response_model=UserResponse)
async def update_profile(
    body: ProfileUpdate,
    principal: Principal = Depends(Gate("users.updateProfile")),
    auth: AuthService = Depends(get_auth_service),
):
    """Update the caller's own profile."""
    user = await auth.update_profile(
        principal,
        name=body.name,
        email=body.email,
        password=body.password,
    )
    return UserResponse.model_validate(user)


@router.put("/{user_id}/role", response_model=UserResponse)
async def set_user_role(
    user_id: int,
    body: RoleUpdate,
    principal: Principal = Depends(Gate("users.setRole")),
    auth: AuthService = Depends(get_auth_service),
):
    """Change a user's role (admin only)."""
    user = await auth.set_role(principal, user_id, body.role)
    return UserResponse.model_validate(user)
