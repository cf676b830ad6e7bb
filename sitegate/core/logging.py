"""Logging configuration and utilities."""
import logging
import sys
from typing import Any, Dict, Optional

import structlog
from structlog.stdlib import LoggerFactory

from ..config import MonitoringSettings


def configure_logging(monitoring: Optional[MonitoringSettings] = None):
    """Configure structured logging."""
    monitoring = monitoring or MonitoringSettings()

    if monitoring.format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, monitoring.level.upper(), logging.INFO),
    )

    # Set third-party log levels
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class RequestLogger:
    """Request logging utility."""

    @staticmethod
    def log_request(
        method: str,
        path: str,
        user_id: Optional[int] = None,
        request_id: str = None,
        extra_data: Dict[str, Any] = None
    ):
        """Log incoming request."""
        logger = structlog.get_logger("api.request")
        logger.info(
            "Request started",
            method=method,
            path=path,
            user_id=user_id,
            request_id=request_id,
            **(extra_data or {})
        )

    @staticmethod
    def log_response(
        method: str,
        path: str,
        status_code: int,
        response_time_ms: float,
        user_id: Optional[int] = None,
        request_id: str = None,
    ):
        """Log response."""
        logger = structlog.get_logger("api.response")
        logger.info(
            "Request completed",
            method=method,
            path=path,
            status_code=status_code,
            response_time_ms=response_time_ms,
            user_id=user_id,
            request_id=request_id,
        )


class SecurityLogger:
    """Security event logging utility.

    Passwords, hashes, session values and reset tokens never reach these
    methods.
    """

    @staticmethod
    def log_login_attempt(
        email: str,
        success: bool,
        elevated: bool = False,
        user_id: Optional[int] = None,
    ):
        """Log login attempt."""
        logger = structlog.get_logger("security.auth")
        logger.info(
            "Login attempt",
            event_type="login_attempt",
            email=email,
            success=success,
            elevated=elevated,
            user_id=user_id,
        )

    @staticmethod
    def log_registration(email: str, user_id: int):
        """Log a new account."""
        logger = structlog.get_logger("security.auth")
        logger.info(
            "User registered",
            event_type="user_registered",
            email=email,
            user_id=user_id,
        )

    @staticmethod
    def log_access_denied(
        operation: str,
        reason: str,
        user_id: Optional[int] = None,
    ):
        """Log a request rejected by the authorization gate."""
        logger = structlog.get_logger("security.access")
        logger.warning(
            "Access denied",
            event_type="access_denied",
            operation=operation,
            reason=reason,
            user_id=user_id,
        )

    @staticmethod
    def log_password_reset_requested(email: str, known: bool):
        """Log password reset request."""
        logger = structlog.get_logger("security.reset")
        logger.info(
            "Password reset requested",
            event_type="password_reset_requested",
            email=email,
            known=known,
        )

    @staticmethod
    def log_password_reset(email: str, user_id: int):
        """Log password overwrite via the reset flow."""
        logger = structlog.get_logger("security.reset")
        logger.warning(
            "Password reset completed",
            event_type="password_reset",
            email=email,
            user_id=user_id,
        )

    @staticmethod
    def log_role_changed(user_id: int, old_role: str, new_role: str, changed_by: Optional[int]):
        """Log an administrative role update."""
        logger = structlog.get_logger("security.roles")
        logger.warning(
            "User role changed",
            event_type="role_changed",
            user_id=user_id,
            old_role=old_role,
            new_role=new_role,
            changed_by=changed_by,
        )

    @staticmethod
    def log_admin_bootstrap(email: str, created: bool):
        """Log admin bootstrap outcome."""
        logger = structlog.get_logger("security.bootstrap")
        logger.info(
            "Admin bootstrap",
            event_type="admin_bootstrap",
            email=email,
            created=created,
        )
