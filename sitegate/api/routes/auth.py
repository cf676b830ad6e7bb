"""Authentication routes."""
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Response

from ...core.auth import AuthService
from ...core.exceptions import StorageUnavailableError
from ...core.security import Gate, get_auth_service
from ...core.sessions import Principal
from ...schemas.auth import (
    AdminLoginRequest,
    LoginRequest,
    LoginResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterRequest,
    UserResponse,
)
from ...schemas.common import SuccessResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])

logger = structlog.get_logger("api.auth")


@router.get("/me", response_model=Optional[UserResponse])
async def get_current_user_info(
    principal: Principal = Depends(Gate("auth.me")),
    auth: AuthService = Depends(get_auth_service),
):
    """Current user, or null for anonymous callers."""
    if not principal.is_authenticated:
        return None

    try:
        user = await auth.get_user(principal.user_id)
    except StorageUnavailableError:
        logger.warning("Directory unavailable, reporting anonymous", user_id=principal.user_id)
        return None

    return UserResponse.model_validate(user) if user else None


@router.post(
    "/register",
    response_model=UserResponse,
    dependencies=[Depends(Gate("auth.register"))],
)
async def register_user(
    body: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Register a new user. No session is issued."""
    user = await auth.register(body.email, body.password, body.name)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    dependencies=[Depends(Gate("auth.login"))],
)
async def login_user(
    body: LoginRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """Login user and set the session cookie."""
    result = await auth.login(body.email, body.password, remember_me=body.remember_me)
    auth.sessions.set_cookie(response, result.session)
    return LoginResponse(user=UserResponse.model_validate(result.user))


@router.post(
    "/admin-login",
    response_model=LoginResponse,
    dependencies=[Depends(Gate("auth.adminLogin"))],
)
async def admin_login(
    body: AdminLoginRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """Login an admin and set an elevated session cookie."""
    result = await auth.admin_login(body.email, body.password)
    auth.sessions.set_cookie(response, result.session)
    return LoginResponse(user=UserResponse.model_validate(result.user))


@router.post(
    "/logout",
    response_model=SuccessResponse,
    dependencies=[Depends(Gate("auth.logout"))],
)
async def logout_user(
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """Logout by overwriting the cookie with an expired one."""
    auth.sessions.clear_cookie(response)
    return SuccessResponse(message="Logged out")


@router.post(
    "/request-password-reset",
    response_model=SuccessResponse,
    dependencies=[Depends(Gate("auth.requestPasswordReset"))],
)
async def request_password_reset(
    body: PasswordResetRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Start a password reset. Reports success whether or not the email exists."""
    await auth.request_password_reset(body.email)
    return SuccessResponse()


@router.post(
    "/reset-password",
    response_model=SuccessResponse,
    dependencies=[Depends(Gate("auth.resetPassword"))],
)
async def reset_password(
    body: PasswordResetConfirm,
    auth: AuthService = Depends(get_auth_service),
):
    """Overwrite the password for an email."""
    await auth.reset_password(body.email, body.new_password)
    return SuccessResponse()
