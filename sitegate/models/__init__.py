"""Database models module."""
from .base import Base
from .user import User, UserRole

__all__ = [
    "Base",
    "User",
    "UserRole",
]
