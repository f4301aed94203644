"""
Configuration management for buildplan.

Provides centralized, type-safe tool configuration with environment variable
overrides and sensible defaults for the loader, resolver and CLI.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_PLUGINS: tuple[str, ...] = (
    "com.android.application",
    "kotlin-android",
    "dev.flutter.flutter-plugin-loader",
    "com.google.gms.google-services",
)

LogFormat = Literal["auto", "console", "json"]


class FilesConfig(BaseModel):
    """Names of the files read from an Android project directory."""

    local_properties: str = Field(default="local.properties", description="SDK/Flutter property file")
    key_properties: str = Field(default="key.properties", description="Release keystore property file")
    app_module: str = Field(default="app", description="Application module directory")


class Config(BaseModel):
    """Root configuration for buildplan."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING", description="Logging level"
    )
    log_format: LogFormat = Field(
        default="auto", description="Console on a terminal, JSON otherwise, unless forced"
    )
    default_profile: str = Field(default="mizan", description="Profile used when none is given")
    default_plugins: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PLUGINS),
        description="Plugins requested when the caller names none",
    )
    files: FilesConfig = Field(default_factory=FilesConfig)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables."""
        # Load .env file if it exists (looks in cwd and parent directories)
        load_dotenv()

        plugins = os.environ.get("BUILDPLAN_DEFAULT_PLUGINS")
        return cls(
            log_level=os.environ.get("BUILDPLAN_LOG_LEVEL", "WARNING").upper(),  # type: ignore
            log_format=os.environ.get("BUILDPLAN_LOG_FORMAT", "auto").lower(),  # type: ignore
            default_profile=os.environ.get("BUILDPLAN_PROFILE", "mizan"),
            default_plugins=(
                [p.strip() for p in plugins.split(",") if p.strip()]
                if plugins
                else list(DEFAULT_PLUGINS)
            ),
            files=FilesConfig(
                key_properties=os.environ.get("BUILDPLAN_KEY_PROPERTIES", "key.properties"),
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
