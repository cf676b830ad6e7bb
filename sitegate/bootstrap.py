"""Initial admin account setup.

Run once at deployment time::

    sitegate-init-admin --email admin@example.com --password 's3cret!'

Email and password default to BOOTSTRAP_ADMIN_EMAIL / BOOTSTRAP_ADMIN_PASSWORD.
Running it again is harmless: an existing account is left as it is.
"""
import argparse
import asyncio
import sys
from typing import Optional, Sequence

import structlog

from .config import Settings
from .core.auth import AuthService
from .core.exceptions import BaseAPIException
from .core.logging import configure_logging
from .core.sessions import SessionManager
from .database import Database
from .models.user import User
from .schemas.auth import check_email
from .services.directory import SqlUserDirectory

logger = structlog.get_logger("sitegate.bootstrap")


async def bootstrap_admin(
    database: Database,
    sessions: SessionManager,
    email: str,
    password: str,
) -> User:
    """Ensure the admin account exists using a session of its own."""
    async with database.session() as db:
        service = AuthService(SqlUserDirectory(db), sessions)
        return await service.ensure_admin(email, password)


async def _run(settings: Settings, email: str, password: str) -> User:
    database = Database(settings.database)
    try:
        await database.init_db()
        return await bootstrap_admin(database, SessionManager(settings.auth), email, password)
    finally:
        await database.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = Settings()
    parser = argparse.ArgumentParser(description="Create the initial admin account")
    parser.add_argument("--email", default=settings.bootstrap.admin_email)
    parser.add_argument("--password", default=settings.bootstrap.admin_password)
    args = parser.parse_args(argv)

    if not args.email or not args.password:
        parser.error("admin email and password are required")
    try:
        check_email(args.email)
    except ValueError:
        parser.error(f"not a valid email address: {args.email}")

    configure_logging(settings.monitoring)

    try:
        user = asyncio.run(_run(settings, args.email, args.password))
    except BaseAPIException as e:
        logger.error("Admin bootstrap failed", error_code=e.error_code, error=e.message)
        return 1

    logger.info("Admin account ready", user_id=user.id, email=user.email, role=user.role.value)
    return 0


if __name__ == "__main__":
    sys.exit(main())
