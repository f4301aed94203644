"""
Resolved build plan models.

These models represent the output of plan resolution: the signing identity,
SDK levels, optimization flags and plugin application order of one build.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, SecretStr, model_validator

from .environment import BuildType


class SigningSource(str, Enum):
    """Where a signing identity comes from."""

    DEBUG_FALLBACK = "debug_fallback"
    RELEASE_KEYSTORE = "release_keystore"


class SigningIdentity(BaseModel):
    """Credentials used to sign the package.

    Either all four credential fields are set (release keystore) or none are
    (the Android debug keystore is used).
    """

    source: SigningSource = Field(description="Origin of the credentials")
    alias: str | None = Field(default=None, description="Key alias")
    password: SecretStr | None = Field(default=None, description="Key password")
    store_path: str | None = Field(default=None, description="Keystore file path")
    store_password: SecretStr | None = Field(default=None, description="Keystore password")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_complete(self) -> SigningIdentity:
        fields = (self.alias, self.password, self.store_path, self.store_password)
        present = sum(value is not None for value in fields)
        if present not in (0, len(fields)):
            raise ValueError("signing credentials must be all present or all absent")
        if self.source is SigningSource.RELEASE_KEYSTORE and present == 0:
            raise ValueError("release keystore identity requires credentials")
        if self.source is SigningSource.DEBUG_FALLBACK and present:
            raise ValueError("debug fallback identity carries no credentials")
        return self

    @classmethod
    def debug_fallback(cls) -> SigningIdentity:
        """Identity that signs with the Android debug keystore."""
        return cls(source=SigningSource.DEBUG_FALLBACK)

    @property
    def is_release(self) -> bool:
        """Whether this identity uses a release keystore."""
        return self.source is SigningSource.RELEASE_KEYSTORE


class ResolvedPlan(BaseModel):
    """Fully resolved configuration for one build."""

    build_type: BuildType
    profile: str = Field(description="Name of the profile the plan was resolved from")

    # Identity
    application_id: str
    namespace: str
    version_code: int = Field(ge=1)
    version_name: str

    # SDK levels
    min_sdk: int
    target_sdk: int
    compile_sdk: int
    ndk_version: str | None = None
    jvm_target: str = "1.8"

    signing: SigningIdentity
    minify: bool
    shrink_resources: bool

    # Plugins, in application order; deferred ones are a suffix of it
    plugin_application_order: tuple[str, ...] = ()
    deferred_plugins: tuple[str, ...] = ()

    # Flutter integration
    dotenv_file: str | None = None
    flutter_source: str = "../.."
    apply_flutter_gradle: bool = True

    # Build script classpath
    agp_version: str
    kotlin_version: str
    google_services_version: str

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_invariants(self) -> ResolvedPlan:
        if not self.min_sdk <= self.target_sdk <= self.compile_sdk:
            raise ValueError("expected min_sdk <= target_sdk <= compile_sdk")
        if self.deferred_plugins:
            tail = self.plugin_application_order[-len(self.deferred_plugins):]
            if tail != self.deferred_plugins:
                raise ValueError("deferred plugins must be applied last")
        return self

    @property
    def eager_plugins(self) -> tuple[str, ...]:
        """Plugins applied in the plugins block, before any deferred ones."""
        return self.plugin_application_order[: len(self.plugin_application_order) - len(self.deferred_plugins)]
