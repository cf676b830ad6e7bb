"""Request-scoped security dependencies."""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..services.directory import SqlUserDirectory
from .access import authorize, enforce, required_role_for
from .auth import AuthService
from .logging import SecurityLogger
from .sessions import Principal, SessionManager


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_principal(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
) -> Principal:
    """Principal for the current request, read from the session cookie only."""
    principal = sessions.read(request.cookies.get(sessions.cookie_name))
    request.state.principal = principal
    return principal


def get_auth_service(
    request: Request,
    db: AsyncSession = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> AuthService:
    return AuthService(
        SqlUserDirectory(db),
        sessions,
        min_password_length=request.app.state.settings.auth.min_password_length,
    )


class Gate:
    """Dependency enforcing the declared role of an operation.

    Runs before the endpoint body, so a denied call has no side effects.
    """

    def __init__(self, operation: str):
        self.operation = operation
        self.required = required_role_for(operation)

    def __call__(self, principal: Principal = Depends(get_principal)) -> Principal:
        decision = authorize(principal, self.required)
        if not decision.allowed:
            SecurityLogger.log_access_denied(
                operation=self.operation,
                reason=decision.value,
                user_id=principal.user_id,
            )
        return enforce(principal, self.required)
