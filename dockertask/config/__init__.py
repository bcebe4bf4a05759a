"""Configuration management for dockertask.

Settings are read from the environment (and an optional ``.env`` file) and
exposed both flat and through grouped views.

Usage:
    from dockertask.config import settings

    # Grouped access
    settings.daemon.client_kwargs()
    settings.display.spinner_interval

    # Flat access
    settings.docker_host
    settings.log_level
"""

from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .daemon import DaemonConfig
from .display import DisplayConfig


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Docker daemon connection
    docker_host: Optional[str] = Field(
        default=None,
        description="Daemon URL; falls back to the SDK default socket when unset",
    )
    docker_api_version: str = Field(default="auto")
    docker_timeout: int = Field(default=60, ge=1, le=3600)
    docker_tls_verify: bool = Field(default=False)
    docker_cert_path: Optional[str] = Field(default=None)

    # Terminal display
    spinner_name: str = Field(default="bouncingBall")
    spinner_interval_ms: int = Field(
        default=80,
        ge=10,
        le=1000,
        description="Delay between progress indicator repaints (milliseconds)",
    )
    table_width: int = Field(default=160, ge=40, le=1000)

    # Task files
    task_file: str = Field(default="dockertask.json")

    # Logging Configuration
    log_level: str = Field(default="WARNING")
    log_format: str = Field(default="console")

    @validator("log_level")
    def normalize_log_level(cls, v):
        """Accept log levels in any case."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @validator("log_format")
    def validate_log_format(cls, v):
        """Only console and json rendering are supported."""
        if v not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return v

    @property
    def daemon(self) -> DaemonConfig:
        """Access daemon connection configuration group."""
        return DaemonConfig(
            docker_host=self.docker_host,
            docker_api_version=self.docker_api_version,
            docker_timeout=self.docker_timeout,
            docker_tls_verify=self.docker_tls_verify,
            docker_cert_path=self.docker_cert_path,
        )

    @property
    def display(self) -> DisplayConfig:
        """Access terminal display configuration group."""
        return DisplayConfig(
            spinner_name=self.spinner_name,
            spinner_interval_ms=self.spinner_interval_ms,
            table_width=self.table_width,
        )


settings = Settings()

__all__ = ["Settings", "settings", "DaemonConfig", "DisplayConfig"]
