"""
Build environment models.

A BuildEnvironment is the fully materialized input to plan resolution:
everything the Gradle configuration phase would read from disk or from the
process environment, captured once as an immutable value.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

# Keys read from key.properties
KEY_ALIAS = "keyAlias"
KEY_PASSWORD = "keyPassword"
STORE_FILE = "storeFile"
STORE_PASSWORD = "storePassword"
CREDENTIAL_KEYS: tuple[str, ...] = (KEY_ALIAS, KEY_PASSWORD, STORE_FILE, STORE_PASSWORD)

# Keys read from local.properties by the Flutter Gradle tooling
FLUTTER_SDK = "flutter.sdk"
FLUTTER_MIN_SDK = "flutter.minSdkVersion"
FLUTTER_VERSION_CODE = "flutter.versionCode"
FLUTTER_VERSION_NAME = "flutter.versionName"

# Environment variable overrides
ENV_MIN_SDK = "FLUTTER_MIN_SDK_VERSION"
ENV_VERSION_CODE = "FLUTTER_VERSION_CODE"
ENV_VERSION_NAME = "FLUTTER_VERSION_NAME"


class BuildType(str, Enum):
    """Android build types."""

    DEBUG = "debug"
    RELEASE = "release"


class BuildEnvironment(BaseModel):
    """Immutable snapshot of the inputs to a single build."""

    build_type: BuildType = Field(description="Selected build type")
    has_local_properties: bool = Field(default=False, description="Whether local.properties exists")
    has_key_properties: bool = Field(default=False, description="Whether key.properties exists")
    env_vars: Mapping[str, str] = Field(
        default_factory=dict, validate_default=True, description="Environment variables"
    )
    local_properties: Mapping[str, str] = Field(
        default_factory=dict, validate_default=True, description="Contents of local.properties"
    )
    key_properties: Mapping[str, str] = Field(
        default_factory=dict, validate_default=True, description="Contents of key.properties"
    )

    model_config = {"frozen": True}

    @field_validator("env_vars", "local_properties", "key_properties", mode="after")
    @classmethod
    def _read_only(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        # Copied so later changes to the caller's dict do not leak in
        return MappingProxyType(dict(value))

    @field_serializer("env_vars", "local_properties", "key_properties")
    def _serialize_mapping(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    @model_validator(mode="after")
    def _check_presence(self) -> BuildEnvironment:
        if self.local_properties and not self.has_local_properties:
            raise ValueError("local_properties given but has_local_properties is false")
        if self.key_properties and not self.has_key_properties:
            raise ValueError("key_properties given but has_key_properties is false")
        return self

    @property
    def is_release(self) -> bool:
        """Whether this is a release build."""
        return self.build_type is BuildType.RELEASE

    def lookup(self, env_key: str, property_key: str) -> str | None:
        """Look up an override, preferring the environment over local.properties.

        Args:
            env_key: Environment variable name.
            property_key: Key in local.properties.

        Returns:
            The stripped value, or None when neither source sets a non-blank value.
        """
        for value in (self.env_vars.get(env_key), self.local_properties.get(property_key)):
            if value is not None and value.strip():
                return value.strip()
        return None
