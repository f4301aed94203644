"""
Configuration profile models.

A profile holds the values an app's Gradle file pins literally rather than
computes: SDK levels, identity, toolchain versions.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ConfigurationProfile(BaseModel):
    """Fixed per-app build settings."""

    name: str = Field(description="Profile identifier")
    application_id: str = Field(description="Application ID")
    namespace: str = Field(description="Android namespace")
    compile_sdk: int = Field(default=34, ge=1)
    target_sdk: int = Field(default=34, ge=1)
    min_sdk: int = Field(default=21, ge=1, description="Flutter-provided minSdk default")
    ndk_version: str | None = Field(default=None)
    jvm_target: str = Field(default="1.8")
    default_version_code: int = Field(default=1)
    default_version_name: str = Field(default="1.0")
    dotenv_file: str | None = Field(default=".env", description="Set as the flutter.dotenv ext property")
    flutter_source: str = Field(default="../..", description="Flutter project root relative to the app module")
    apply_flutter_gradle: bool = Field(
        default=True, description="Apply flutter.gradle from the SDK named in local.properties"
    )

    # Build script classpath
    agp_version: str = Field(default="8.1.0")
    kotlin_version: str = Field(default="1.9.0")
    google_services_version: str = Field(default="4.4.1")

    model_config = {"frozen": True, "extra": "forbid"}


BUILTIN_PROFILES: dict[str, ConfigurationProfile] = {
    profile.name: profile
    for profile in (
        ConfigurationProfile(
            name="mizan",
            application_id="com.example.mizan.mizan",
            namespace="com.example.mizan.mizan",
            compile_sdk=34,
            target_sdk=34,
            min_sdk=21,
            ndk_version="26.1.10909125",
        ),
        ConfigurationProfile(
            name="flutter-stable",
            application_id="com.example.app",
            namespace="com.example.app",
            compile_sdk=34,
            target_sdk=34,
            min_sdk=21,
            jvm_target="17",
            agp_version="8.3.2",
            kotlin_version="1.9.24",
            apply_flutter_gradle=False,
        ),
        ConfigurationProfile(
            name="flutter-35",
            application_id="com.example.app",
            namespace="com.example.app",
            compile_sdk=35,
            target_sdk=35,
            min_sdk=23,
            jvm_target="17",
            agp_version="8.5.0",
            kotlin_version="1.9.24",
            apply_flutter_gradle=False,
        ),
    )
}

DEFAULT_PROFILE = BUILTIN_PROFILES["mizan"]
