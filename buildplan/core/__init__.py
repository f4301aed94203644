"""Core infrastructure components for buildplan."""

from .config import Config, get_config
from .exceptions import (
    BuildPlanError,
    ConfigError,
    ConfigErrorKind,
    ProfileError,
    PropertiesError,
)
from .logging import bind_context, clear_context, get_logger, setup_logging

__all__ = [
    "Config",
    "get_config",
    "BuildPlanError",
    "ConfigError",
    "ConfigErrorKind",
    "ProfileError",
    "PropertiesError",
    "bind_context",
    "clear_context",
    "get_logger",
    "setup_logging",
]
