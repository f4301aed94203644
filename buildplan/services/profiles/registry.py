"""
Profile registry for managing and retrieving configuration profiles.
"""

from __future__ import annotations

from pathlib import Path

import aiofiles
from pydantic import ValidationError

from ...core.exceptions import ProfileError
from ...models.profile import BUILTIN_PROFILES, ConfigurationProfile

# Global registry of profiles
_PROFILE_REGISTRY: dict[str, ConfigurationProfile] = dict(BUILTIN_PROFILES)


class ProfileRegistry:
    """Registry for named configuration profiles."""

    @classmethod
    def register(cls, profile: ConfigurationProfile) -> ConfigurationProfile:
        """Register a profile, replacing any profile of the same name.

        Args:
            profile: The profile to register.

        Returns:
            The registered profile.
        """
        _PROFILE_REGISTRY[profile.name] = profile
        return profile

    @classmethod
    def get(cls, name: str) -> ConfigurationProfile:
        """Get a profile by name.

        Args:
            name: The registered profile name.

        Returns:
            The profile.

        Raises:
            ProfileError: If no profile has that name.
        """
        try:
            return _PROFILE_REGISTRY[name]
        except KeyError:
            raise ProfileError(
                "Unknown profile",
                context={"available": cls.list_profiles()},
                profile_name=name,
            ) from None

    @classmethod
    def list_profiles(cls) -> list[str]:
        """List all registered profile names, sorted."""
        return sorted(_PROFILE_REGISTRY)

    @classmethod
    def reset(cls) -> None:
        """Restore the registry to the built-in profiles.

        Primarily intended for testing purposes.
        """
        _PROFILE_REGISTRY.clear()
        _PROFILE_REGISTRY.update(BUILTIN_PROFILES)


async def load_profile_file(path: Path) -> ConfigurationProfile:
    """Load a profile from a JSON file.

    Args:
        path: JSON file holding ConfigurationProfile fields.

    Returns:
        The parsed profile (not registered).

    Raises:
        ProfileError: If the file cannot be read or is not a valid profile.
    """
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()
    except OSError as e:
        raise ProfileError(f"Cannot read profile file: {e}", profile_name=str(path), cause=e) from e

    try:
        return ConfigurationProfile.model_validate_json(content)
    except ValidationError as e:
        raise ProfileError(
            f"Invalid profile file: {e.error_count()} error(s)",
            context={"errors": [err["msg"] for err in e.errors()]},
            profile_name=str(path),
            cause=e,
        ) from e
