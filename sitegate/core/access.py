"""Authorization gate.

Every operation of the site declares the role it needs in ``OPERATION_ROLES``
and is checked through :func:`enforce` before it runs. Content operations
(posts, categories, comments, settings, analytics) are served by other
components; they look up their role here the same way the user operations
below do.
"""
import enum
from typing import Dict

from .exceptions import ForbiddenError, UnauthenticatedError
from .sessions import Principal


class RequiredRole(str, enum.Enum):
    NONE = "none"
    USER = "user"
    ADMIN = "admin"


class Decision(str, enum.Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOW


OPERATION_ROLES: Dict[str, RequiredRole] = {
    # auth
    "auth.me": RequiredRole.NONE,
    "auth.register": RequiredRole.NONE,
    "auth.login": RequiredRole.NONE,
    "auth.adminLogin": RequiredRole.NONE,
    "auth.logout": RequiredRole.USER,
    "auth.requestPasswordReset": RequiredRole.NONE,
    "auth.resetPassword": RequiredRole.NONE,
    # posts
    "posts.getAll": RequiredRole.NONE,
    "posts.getByCategory": RequiredRole.NONE,
    "posts.getById": RequiredRole.NONE,
    "posts.getBySlug": RequiredRole.NONE,
    "posts.create": RequiredRole.ADMIN,
    "posts.update": RequiredRole.ADMIN,
    "posts.delete": RequiredRole.ADMIN,
    # categories
    "categories.getAll": RequiredRole.NONE,
    "categories.getById": RequiredRole.NONE,
    "categories.create": RequiredRole.ADMIN,
    "categories.update": RequiredRole.ADMIN,
    "categories.delete": RequiredRole.ADMIN,
    # comments
    "comments.getByPost": RequiredRole.NONE,
    "comments.create": RequiredRole.USER,
    "comments.delete": RequiredRole.ADMIN,
    # settings
    "settings.getAll": RequiredRole.NONE,
    "settings.get": RequiredRole.NONE,
    "settings.set": RequiredRole.ADMIN,
    # analytics
    "analytics.get": RequiredRole.NONE,
    "analytics.update": RequiredRole.ADMIN,
    # users
    "users.getAll": RequiredRole.ADMIN,
    "users.updateProfile": RequiredRole.USER,
    "users.setRole": RequiredRole.ADMIN,
}


def required_role_for(operation: str) -> RequiredRole:
    """Declared role for an operation; KeyError if it was never declared."""
    try:
        return OPERATION_ROLES[operation]
    except KeyError:
        raise KeyError(f"No required role declared for operation '{operation}'") from None


def authorize(principal: Principal, required: RequiredRole) -> Decision:
    """Decide whether a principal satisfies a required role."""
    if required is RequiredRole.NONE:
        return Decision.ALLOW

    if not principal.is_authenticated:
        return Decision.UNAUTHENTICATED

    if required is RequiredRole.USER:
        return Decision.ALLOW

    if required is RequiredRole.ADMIN and principal.is_admin:
        return Decision.ALLOW

    return Decision.FORBIDDEN


def enforce(principal: Principal, required: RequiredRole) -> Principal:
    """Raise the matching error unless the principal is allowed."""
    decision = authorize(principal, required)
    if decision is Decision.UNAUTHENTICATED:
        raise UnauthenticatedError()
    if decision is Decision.FORBIDDEN:
        raise ForbiddenError()
    return principal
