"""
Configuration management for the email builder.

Provides centralized, validated configuration from environment variables
with proper type checking and defaults.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Template store configuration."""

    url: str = Field(default="sqlite:///./email_builder.db", alias="DATABASE_URL")
    echo: bool = Field(default=False, alias="DATABASE_ECHO")

    @field_validator("echo", mode="before")
    @classmethod
    def parse_echo(cls, v):
        if isinstance(v, str):
            return v.lower() in ("1", "true", "yes")
        return bool(v)

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")


class ServerConfig(BaseSettings):
    """HTTP server configuration."""

    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=3001, alias="PORT")
    cors_origin: str = Field(default="http://localhost:5173", alias="CORS_ORIGIN")

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")


class FeedConfig(BaseSettings):
    """XML feed fetching configuration."""

    # Relative feed URLs (as saved by the editor) are resolved against this
    base_url: Optional[str] = Field(default=None, alias="FEED_BASE_URL")
    timeout: float = Field(default=15.0, alias="FEED_TIMEOUT")
    max_retries: int = Field(default=3, alias="FEED_MAX_RETRIES")
    max_workers: int = Field(default=6, alias="FEED_MAX_WORKERS")

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")


class ApiClientConfig(BaseSettings):
    """Templates API client configuration."""

    api_url: str = Field(default="http://localhost:3001/api", alias="EMAIL_BUILDER_API_URL")
    timeout: float = Field(default=15.0, alias="EMAIL_BUILDER_API_TIMEOUT")

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")


class Settings(BaseSettings):
    """Main application settings."""

    # Environment
    environment: str = Field(default="production", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # Component configurations
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    feeds: FeedConfig = Field(default_factory=FeedConfig)
    api_client: ApiClientConfig = Field(default_factory=ApiClientConfig)

    @field_validator("debug", mode="before")
    @classmethod
    def parse_debug(cls, v):
        if isinstance(v, str):
            return v.lower() in ("1", "true", "yes")
        return bool(v)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global settings
    settings = None


def validate_required_settings(for_workflow: str = "server") -> List[str]:
    """
    Validate that required settings are present for specific workflows.

    Args:
        for_workflow: Workflow name ("server" or "client")

    Returns:
        List of missing or invalid settings
    """
    missing = []
    try:
        config = get_settings()

        if for_workflow == "server":
            if not config.database.url:
                missing.append("DATABASE_URL")
            if not (0 < config.server.port < 65536):
                missing.append("PORT")

        elif for_workflow == "client":
            if not config.api_client.api_url:
                missing.append("EMAIL_BUILDER_API_URL")

    except Exception as e:
        missing.append(f"Configuration error: {e}")

    return missing


def configuration_summary() -> Dict[str, str]:
    """Return a flat summary of the active configuration for display."""
    config = get_settings()
    return {
        "Environment": config.environment,
        "Debug Mode": str(config.debug),
        "Database": config.database.url,
        "Server": f"{config.server.host}:{config.server.port}",
        "CORS Origin": config.server.cors_origin,
        "Feed Base URL": config.feeds.base_url or "(absolute URLs only)",
        "Feed Timeout": f"{config.feeds.timeout}s",
        "API URL": config.api_client.api_url,
    }
