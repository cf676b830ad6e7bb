"""Pydantic schemas module."""
from .auth import (
    AdminLoginRequest,
    EmailAddress,
    LoginRequest,
    LoginResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    ProfileUpdate,
    RegisterRequest,
    RoleUpdate,
    UserResponse,
    check_email,
)
from .common import (
    ErrorResponse,
    HealthResponse,
    SuccessResponse,
)

__all__ = [
    # Auth
    "AdminLoginRequest",
    "EmailAddress",
    "LoginRequest",
    "LoginResponse",
    "PasswordResetConfirm",
    "PasswordResetRequest",
    "ProfileUpdate",
    "RegisterRequest",
    "RoleUpdate",
    "UserResponse",
    "check_email",
    # Common
    "ErrorResponse",
    "HealthResponse",
    "SuccessResponse",
]
