"""Application configuration settings."""
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_", env_file=".env", extra="ignore")

    url: str = Field(default="sqlite+aiosqlite:///./sitegate.db")
    echo: bool = Field(default=False)


class AuthSettings(BaseSettings):
    """Session and credential configuration."""

    model_config = SettingsConfigDict(env_prefix="AUTH_", env_file=".env", extra="ignore")

    secret_key: str = Field(default="change-me-in-production")
    algorithm: str = Field(default="HS256")

    # Session cookie
    cookie_name: str = Field(default="app_session_id")
    cookie_path: str = Field(default="/")
    cookie_secure: bool = Field(default=False)
    cookie_samesite: str = Field(default="lax")
    session_max_age: int = Field(default=60 * 60 * 24)  # seconds
    remember_me_max_age: int = Field(default=60 * 60 * 24 * 30)  # seconds

    min_password_length: int = Field(default=6)


class BootstrapSettings(BaseSettings):
    """Initial admin account configuration."""

    model_config = SettingsConfigDict(env_prefix="BOOTSTRAP_", env_file=".env", extra="ignore")

    admin_email: Optional[str] = Field(default=None)
    admin_password: Optional[str] = Field(default=None)
    on_startup: bool = Field(default=False)


class APISettings(BaseSettings):
    """API configuration."""

    model_config = SettingsConfigDict(env_prefix="API_", env_file=".env", extra="ignore")

    title: str = "SiteGate"
    description: str = "Identity and access control for the content site back office"
    version: str = "0.1.0"
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    reload: bool = Field(default=False)

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
    )


class MonitoringSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = Field(default="INFO")
    format: str = Field(default="json")  # json | console


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Sub-configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    bootstrap: BootstrapSettings = Field(default_factory=BootstrapSettings)
    api: APISettings = Field(default_factory=APISettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)


# Process default; the app factory accepts an explicit instance instead.
settings = Settings()
