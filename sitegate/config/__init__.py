"""Configuration module."""
from .settings import (
    APISettings,
    AuthSettings,
    BootstrapSettings,
    DatabaseSettings,
    MonitoringSettings,
    Settings,
    settings,
)

__all__ = [
    "APISettings",
    "AuthSettings",
    "BootstrapSettings",
    "DatabaseSettings",
    "MonitoringSettings",
    "Settings",
    "settings",
]
