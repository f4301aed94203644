"""
Custom exception hierarchy for buildplan.

All exceptions inherit from BuildPlanError to enable consistent error handling
across the loader, resolver and CLI. Each exception type includes context for
debugging and logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ConfigErrorKind(str, Enum):
    """Kinds of terminal build configuration errors."""

    INCOMPLETE_CREDENTIALS = "incomplete_credentials"
    SDK_ORDERING_VIOLATION = "sdk_ordering_violation"
    DUPLICATE_PLUGIN = "duplicate_plugin"
    INVALID_VALUE = "invalid_value"


EXIT_CODES: dict[ConfigErrorKind, int] = {
    ConfigErrorKind.INCOMPLETE_CREDENTIALS: 2,
    ConfigErrorKind.SDK_ORDERING_VIOLATION: 3,
    ConfigErrorKind.DUPLICATE_PLUGIN: 4,
    ConfigErrorKind.INVALID_VALUE: 5,
}


@dataclass
class BuildPlanError(Exception):
    """Base exception for all buildplan errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"

    @property
    def exit_code(self) -> int:
        """Process exit code for this error."""
        return 1


@dataclass
class ConfigError(BuildPlanError):
    """Raised when the build inputs describe an invalid configuration.

    These reflect static misconfiguration and are never retried.
    """

    kind: ConfigErrorKind = ConfigErrorKind.INVALID_VALUE

    def __str__(self) -> str:
        return f"[{self.kind.value}] {super().__str__()}"

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.kind]


@dataclass
class ProfileError(BuildPlanError):
    """Raised when a configuration profile cannot be found or loaded."""

    profile_name: str = ""

    def __str__(self) -> str:
        return f"Profile '{self.profile_name}': {super().__str__()}"


@dataclass
class PropertiesError(BuildPlanError):
    """Raised when a property or environment file cannot be read or parsed."""

    file_path: str = ""
    line_number: int | None = None

    def __str__(self) -> str:
        base = super().__str__()
        where = f"{self.file_path}:{self.line_number}" if self.line_number else self.file_path
        return f"{where}: {base}" if where else base
