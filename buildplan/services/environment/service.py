"""
Environment Loading Service.

Reads everything plan resolution needs from an Android project directory and
the process environment, and captures it as an immutable BuildEnvironment.
This is the only place buildplan touches the filesystem before rendering.
"""

from __future__ import annotations

import io
import os
from collections.abc import Mapping
from pathlib import Path

import aiofiles
import aiofiles.os
from dotenv import dotenv_values

from ...core.config import FilesConfig
from ...core.exceptions import PropertiesError
from ...core.logging import get_logger
from ...models.environment import BuildEnvironment, BuildType
from .properties import parse_properties

logger = get_logger(__name__)


class EnvironmentLoader:
    """Materializes a BuildEnvironment from an Android project directory.

    Layout follows the Flutter convention: local.properties and key.properties
    sit in the android/ directory, the .env file in the Flutter project root
    one level above it. The .env name belongs to the configuration profile,
    since the rendered Gradle file points Flutter at the same file.
    """

    def __init__(self, files: FilesConfig | None = None) -> None:
        """Initialize the loader.

        Args:
            files: File names to read. Defaults to the standard Flutter names.
        """
        self.files = files or FilesConfig()

    async def _read_text(self, path: Path) -> str | None:
        """Read a text file, returning None when it does not exist."""
        if not await aiofiles.os.path.isfile(path):
            return None
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                return await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise PropertiesError(f"Cannot read file: {e}", file_path=str(path), cause=e) from e

    async def read_properties(self, path: Path) -> dict[str, str] | None:
        """Read and parse a .properties file.

        Args:
            path: File to read.

        Returns:
            Parsed properties, or None when the file does not exist.
        """
        text = await self._read_text(path)
        if text is None:
            return None
        return parse_properties(text, source=str(path))

    async def read_dotenv(self, path: Path) -> dict[str, str]:
        """Read a Flutter .env file; a missing file yields no variables."""
        text = await self._read_text(path)
        if text is None:
            return {}
        values = dotenv_values(stream=io.StringIO(text))
        return {key: value for key, value in values.items() if value is not None}

    async def load(
        self,
        android_dir: Path,
        build_type: BuildType,
        environ: Mapping[str, str] | None = None,
        dotenv_file: str | None = ".env",
    ) -> BuildEnvironment:
        """Load the build environment.

        Args:
            android_dir: The Flutter project's android/ directory.
            build_type: Selected build type.
            environ: Process environment. Defaults to os.environ.
            dotenv_file: Flutter .env file name, relative to the project root.
                None skips the file. Callers pass the profile's value.

        Returns:
            The materialized environment.

        Raises:
            PropertiesError: If the directory is missing or a file is unreadable.
        """
        if not await aiofiles.os.path.isdir(android_dir):
            raise PropertiesError("Android project directory not found", file_path=str(android_dir))

        local_path = android_dir / self.files.local_properties
        key_path = android_dir / self.files.key_properties

        local_properties = await self.read_properties(local_path)
        key_properties = await self.read_properties(key_path)

        # Process variables take precedence over the .env file
        env_vars = {}
        if dotenv_file is not None:
            env_vars = await self.read_dotenv(android_dir.parent / dotenv_file)
        env_vars.update(os.environ if environ is None else environ)

        logger.info(
            "environment_loaded",
            android_dir=str(android_dir),
            build_type=build_type.value,
            has_local_properties=local_properties is not None,
            has_key_properties=key_properties is not None,
        )
        return BuildEnvironment(
            build_type=build_type,
            has_local_properties=local_properties is not None,
            has_key_properties=key_properties is not None,
            env_vars=env_vars,
            local_properties=local_properties or {},
            key_properties=key_properties or {},
        )
