"""Tests for the authorization gate."""
import pytest

from sitegate.core.access import (
    OPERATION_ROLES,
    Decision,
    RequiredRole,
    authorize,
    enforce,
    required_role_for,
)
from sitegate.core.exceptions import ForbiddenError, UnauthenticatedError
from sitegate.core.sessions import Principal

ANONYMOUS = Principal.anonymous()
USER = Principal.authenticated(1)
ADMIN = Principal.authenticated(2, is_admin=True)


@pytest.mark.parametrize(
    "principal,required,expected",
    [
        (ANONYMOUS, RequiredRole.NONE, Decision.ALLOW),
        (USER, RequiredRole.NONE, Decision.ALLOW),
        (ADMIN, RequiredRole.NONE, Decision.ALLOW),
        (ANONYMOUS, RequiredRole.USER, Decision.UNAUTHENTICATED),
        (USER, RequiredRole.USER, Decision.ALLOW),
        (ADMIN, RequiredRole.USER, Decision.ALLOW),
        (ANONYMOUS, RequiredRole.ADMIN, Decision.UNAUTHENTICATED),
        (USER, RequiredRole.ADMIN, Decision.FORBIDDEN),
        (ADMIN, RequiredRole.ADMIN, Decision.ALLOW),
    ],
)
def test_authorize_policy(principal, required, expected):
    assert authorize(principal, required) is expected


def test_enforce_raises_distinct_errors():
    with pytest.raises(UnauthenticatedError):
        enforce(ANONYMOUS, RequiredRole.USER)

    with pytest.raises(ForbiddenError):
        enforce(USER, RequiredRole.ADMIN)

    assert enforce(ADMIN, RequiredRole.ADMIN) is ADMIN


def test_content_mutations_require_admin():
    for operation, role in OPERATION_ROLES.items():
        area, action = operation.split(".")
        if area in ("posts", "categories", "settings", "analytics") and action in (
            "create", "update", "delete", "set",
        ):
            assert role is RequiredRole.ADMIN, operation


def test_declared_roles_for_user_operations():
    assert required_role_for("users.getAll") is RequiredRole.ADMIN
    assert required_role_for("comments.create") is RequiredRole.USER
    assert required_role_for("comments.delete") is RequiredRole.ADMIN
    assert required_role_for("auth.logout") is RequiredRole.USER


def test_undeclared_operation_is_an_error():
    with pytest.raises(KeyError):
        required_role_for("posts.publish")
