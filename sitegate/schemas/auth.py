"""Authentication schemas."""
import re
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, AliasChoices, Field

from ..models.user import UserRole
from .common import BaseSchema

MIN_PASSWORD_LENGTH = 6
MAX_EMAIL_LENGTH = 320

_EMAIL_PATTERN = re.compile(
    r"(?!\.)(?!.*\.\.)[A-Z0-9_'+\-.]*[A-Z0-9_+\-]@(?:[A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}",
    re.IGNORECASE,
)


def check_email(value: str) -> str:
    """Reject malformed addresses. Accepted addresses are returned exactly as given."""
    if len(value) > MAX_EMAIL_LENGTH or not _EMAIL_PATTERN.fullmatch(value):
        raise ValueError("value is not a valid email address")
    return value


EmailAddress = Annotated[str, AfterValidator(check_email)]


class UserResponse(BaseSchema):
    """User response schema. Never carries the password hash."""

    id: int = Field(..., description="User ID")
    email: str = Field(..., description="User email address")
    name: Optional[str] = Field(None, description="Display name")
    login_method: str = Field(
        ...,
        validation_alias=AliasChoices("login_method", "loginMethod"),
        serialization_alias="loginMethod",
        description="How the user signs in",
    )
    role: UserRole = Field(..., description="User role")
    last_signed_in: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("last_signed_in", "lastSignedIn"),
        serialization_alias="lastSignedIn",
        description="Last sign-in time",
    )
    created_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
        description="Account creation time",
    )
    updated_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
        description="Account last update time",
    )


class RegisterRequest(BaseSchema):
    """Registration request schema."""

    email: EmailAddress = Field(..., description="User email address")
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, description="User password")
    name: Optional[str] = Field(None, description="Display name")


class LoginRequest(BaseSchema):
    """Login request schema."""

    email: EmailAddress = Field(..., description="User email")
    password: str = Field(..., description="User password")
    remember_me: bool = Field(False, alias="rememberMe", description="Keep the session for longer")


class AdminLoginRequest(BaseSchema):
    """Admin login request schema."""

    email: EmailAddress = Field(..., description="Admin email")
    password: str = Field(..., description="Admin password")


class LoginResponse(BaseSchema):
    """Login response schema; the session itself travels in a cookie."""

    success: bool = Field(True, description="Success status")
    user: UserResponse = Field(..., description="User information")


class PasswordResetRequest(BaseSchema):
    """Password reset request schema."""

    email: EmailAddress = Field(..., description="User email")


class PasswordResetConfirm(BaseSchema):
    """Password reset completion schema."""

    email: EmailAddress = Field(..., description="User email")
    new_password: str = Field(
        ..., alias="newPassword", min_length=MIN_PASSWORD_LENGTH, description="New password"
    )


class ProfileUpdate(BaseSchema):
    """Own-profile update schema. Role is deliberately absent."""

    name: Optional[str] = Field(None, description="Display name")
    email: Optional[EmailAddress] = Field(None, description="New email address")
    password: Optional[str] = Field(None, min_length=MIN_PASSWORD_LENGTH, description="New password")


class RoleUpdate(BaseSchema):
    """Administrative role update schema."""

    role: UserRole = Field(..., description="New role")
