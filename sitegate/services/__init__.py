"""Services module."""
from .directory import SqlUserDirectory, UserDirectory

__all__ = [
    "SqlUserDirectory",
    "UserDirectory",
]
