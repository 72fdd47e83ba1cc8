"""
Configuration settings for Delcom Client.

This module provides configuration management using Pydantic settings
with support for environment variables and .env files.
"""

from typing import Optional, Dict, Any
from pathlib import Path
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BASE_URL = "https://public-api.delcom.org/api/v1/"


class DelcomSettings(BaseSettings):
    """
    Main configuration settings for Delcom Client.

    Settings are loaded from multiple sources in order of preference:
    1. Environment variables (prefixed with DELCOM_)
    2. Configuration files (.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="DELCOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL of the Delcom REST API"
    )

    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
        gt=0
    )

    # Credentials used by the CLI to open a session
    email: Optional[str] = Field(
        default=None,
        description="Account email used for login"
    )

    password: Optional[str] = Field(
        default=None,
        description="Account password used for login"
    )

    # Local storage Configuration
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".local" / "share" / "delcom-client",
        description="Directory holding device-local preferences"
    )

    cache_dir: Path = Field(
        default_factory=lambda: Path.home() / ".cache" / "delcom-client",
        description="Directory for resized upload images"
    )

    preferences_namespace: str = Field(
        default="ProfilePrefs",
        description="Namespace of the local key-value store"
    )

    # Media Configuration
    profile_image_size: int = Field(
        default=140,
        description="Edge length in pixels of resized upload images",
        gt=0,
        le=4096
    )

    # Connectivity Configuration
    check_connectivity: bool = Field(
        default=True,
        description="Probe the API host before issuing requests"
    )

    # Logging Configuration
    log_level: str = Field(
        default="WARNING",
        description="Logging level"
    )

    log_http_bodies: bool = Field(
        default=False,
        description="Log request and response bodies"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate base URL and make sure it ends with a slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid base URL '{v}'. It must start with http:// or https://")
        if not v.endswith("/"):
            v = v + "/"
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level '{v}'. Valid levels: {', '.join(sorted(valid_levels))}")
        return v_upper

    def ensure_directories(self) -> None:
        """Ensure data and cache directories exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    @property
    def preferences_path(self) -> Path:
        """Path to the local preferences file."""
        return self.data_dir / f"{self.preferences_namespace}.json"

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

    @property
    def has_credentials(self) -> bool:
        """Check if login credentials are configured."""
        return bool(self.email) and bool(self.password)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary, excluding sensitive data."""
        data = self.model_dump()
        # Mask sensitive data
        if data.get("password"):
            data["password"] = "***masked***"
        return data


def get_settings() -> DelcomSettings:
    """Get the current Delcom Client settings."""
    return DelcomSettings()
