"""User directory: persistence of User records."""
from typing import Any, List, Optional, Protocol

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import AlreadyExistsError, StorageUnavailableError
from ..models.user import User

logger = structlog.get_logger("services.directory")


class UserDirectory(Protocol):
    """Store of User records consumed by the auth core."""

    async def find_by_email(self, email: str) -> Optional[User]: ...

    async def find_by_id(self, user_id: int) -> Optional[User]: ...

    async def create(self, **fields: Any) -> User: ...

    async def update(self, user_id: int, **fields: Any) -> Optional[User]: ...

    async def list_all(self) -> List[User]: ...


class SqlUserDirectory:
    """User directory backed by an async SQLAlchemy session.

    Unique violations surface as AlreadyExistsError, every other store
    failure as StorageUnavailableError. Records are never cached.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise self._unavailable("find_by_email", e) from e
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: int) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise self._unavailable("find_by_id", e) from e
        return result.scalar_one_or_none()

    async def list_all(self) -> List[User]:
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise self._unavailable("list_all", e) from e
        return list(result.scalars().all())

    async def create(self, **fields: Any) -> User:
        user = User(**fields)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise AlreadyExistsError()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise self._unavailable("create", e) from e

        await self.db.refresh(user)
        return user

    async def update(self, user_id: int, **fields: Any) -> Optional[User]:
        user = await self.find_by_id(user_id)
        if user is None:
            return None

        for key, value in fields.items():
            setattr(user, key, value)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise AlreadyExistsError()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise self._unavailable("update", e) from e

        await self.db.refresh(user)
        return user

    @staticmethod
    def _unavailable(operation: str, error: Exception) -> StorageUnavailableError:
        logger.error("Directory operation failed", operation=operation, error=str(error))
        return StorageUnavailableError()
