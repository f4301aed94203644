"""
Build Configuration Resolver.

Turns a BuildEnvironment and the requested plugin list into a ResolvedPlan.
Resolution is a pure function of its inputs: it performs no I/O, holds no
state, and either returns a complete plan or raises a ConfigError.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from ...core.exceptions import ConfigError, ConfigErrorKind
from ...core.logging import get_logger
from ...models.environment import (
    CREDENTIAL_KEYS,
    ENV_MIN_SDK,
    ENV_VERSION_CODE,
    ENV_VERSION_NAME,
    FLUTTER_MIN_SDK,
    FLUTTER_VERSION_CODE,
    FLUTTER_VERSION_NAME,
    KEY_ALIAS,
    KEY_PASSWORD,
    STORE_FILE,
    STORE_PASSWORD,
    BuildEnvironment,
)
from ...models.plan import ResolvedPlan, SigningIdentity, SigningSource
from ...models.profile import DEFAULT_PROFILE, ConfigurationProfile

logger = get_logger(__name__)

# Must be applied after the Flutter plugin loader has injected its
# build-time variables, or it reads an unset project extension property.
GOOGLE_SERVICES_PLUGIN_IDS: frozenset[str] = frozenset(
    {"com.google.gms.google-services", "google-services"}
)


def check_unique_plugins(requested_plugins: Sequence[str]) -> None:
    """Reject a plugin list that names the same identifier twice.

    Raises:
        ConfigError: DUPLICATE_PLUGIN, listing the repeated identifiers.
    """
    duplicates = sorted(p for p, n in Counter(requested_plugins).items() if n > 1)
    if duplicates:
        raise ConfigError(
            f"Plugins requested more than once: {', '.join(duplicates)}",
            context={"duplicates": duplicates},
            kind=ConfigErrorKind.DUPLICATE_PLUGIN,
        )


def resolve_signing(env: BuildEnvironment) -> SigningIdentity:
    """Pick the signing identity for a build.

    Release builds with key.properties use the release keystore when all four
    credential fields are set. Every other case falls back to the debug
    keystore so development builds proceed without credentials.

    Args:
        env: The build environment.

    Returns:
        The resolved signing identity.

    Raises:
        ConfigError: INCOMPLETE_CREDENTIALS when some, but not all, of the
            credential fields are set.
    """
    if not (env.is_release and env.has_key_properties):
        return SigningIdentity.debug_fallback()

    present = {
        key: env.key_properties[key]
        for key in CREDENTIAL_KEYS
        if env.key_properties.get(key, "").strip()
    }
    if not present:
        logger.warning("key_properties_without_credentials", fallback=SigningSource.DEBUG_FALLBACK.value)
        return SigningIdentity.debug_fallback()

    missing = [key for key in CREDENTIAL_KEYS if key not in present]
    if missing:
        raise ConfigError(
            f"key.properties is missing {', '.join(missing)}",
            context={"missing": missing, "present": sorted(present)},
            kind=ConfigErrorKind.INCOMPLETE_CREDENTIALS,
        )

    return SigningIdentity(
        source=SigningSource.RELEASE_KEYSTORE,
        alias=present[KEY_ALIAS],
        password=present[KEY_PASSWORD],
        store_path=present[STORE_FILE],
        store_password=present[STORE_PASSWORD],
    )


def _parse_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(
            f"{name} must be an integer, got {value!r}",
            context={"field": name, "value": value},
            kind=ConfigErrorKind.INVALID_VALUE,
            cause=e,
        ) from e


def resolve_sdk_levels(env: BuildEnvironment, profile: ConfigurationProfile) -> tuple[int, int, int]:
    """Resolve (min_sdk, target_sdk, compile_sdk).

    compile_sdk and target_sdk are fixed by the profile; min_sdk is the
    profile's Flutter default unless the environment overrides it.

    Raises:
        ConfigError: INVALID_VALUE for a non-integer override,
            SDK_ORDERING_VIOLATION unless min <= target <= compile.
    """
    override = env.lookup(ENV_MIN_SDK, FLUTTER_MIN_SDK)
    min_sdk = _parse_int(override, "minSdk") if override is not None else profile.min_sdk
    target_sdk, compile_sdk = profile.target_sdk, profile.compile_sdk

    if not min_sdk <= target_sdk <= compile_sdk:
        raise ConfigError(
            f"SDK levels out of order: minSdk={min_sdk}, targetSdk={target_sdk}, compileSdk={compile_sdk}",
            context={
                "min_sdk": min_sdk,
                "target_sdk": target_sdk,
                "compile_sdk": compile_sdk,
                "profile": profile.name,
            },
            kind=ConfigErrorKind.SDK_ORDERING_VIOLATION,
        )
    return min_sdk, target_sdk, compile_sdk


def resolve_version(env: BuildEnvironment, profile: ConfigurationProfile) -> tuple[int, str]:
    """Resolve (version_code, version_name)."""
    code_value = env.lookup(ENV_VERSION_CODE, FLUTTER_VERSION_CODE)
    version_code = (
        _parse_int(code_value, "versionCode") if code_value is not None else profile.default_version_code
    )
    if version_code < 1:
        raise ConfigError(
            f"versionCode must be at least 1, got {version_code}",
            context={"field": "versionCode", "value": version_code},
            kind=ConfigErrorKind.INVALID_VALUE,
        )
    version_name = env.lookup(ENV_VERSION_NAME, FLUTTER_VERSION_NAME) or profile.default_version_name
    return version_code, version_name


def order_plugins(requested_plugins: Sequence[str]) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Move Google-services to the end of the plugin list.

    Args:
        requested_plugins: Plugin identifiers in requested order.

    Returns:
        Tuple of (application order, deferred plugins). The deferred plugins
        are the trailing elements of the application order.
    """
    eager = tuple(p for p in requested_plugins if p not in GOOGLE_SERVICES_PLUGIN_IDS)
    deferred = tuple(p for p in requested_plugins if p in GOOGLE_SERVICES_PLUGIN_IDS)
    return eager + deferred, deferred


def resolve(
    env: BuildEnvironment,
    requested_plugins: Sequence[str],
    profile: ConfigurationProfile = DEFAULT_PROFILE,
) -> ResolvedPlan:
    """Resolve a complete build plan.

    Args:
        env: Materialized build inputs.
        requested_plugins: Plugin identifiers to apply, without duplicates.
        profile: Fixed per-app settings.

    Returns:
        The resolved plan. Identical inputs always produce equal plans.

    Raises:
        ConfigError: On duplicate plugins, incomplete credentials, invalid
            override values or out-of-order SDK levels.
    """
    check_unique_plugins(requested_plugins)
    signing = resolve_signing(env)
    min_sdk, target_sdk, compile_sdk = resolve_sdk_levels(env, profile)
    version_code, version_name = resolve_version(env, profile)
    plugin_order, deferred = order_plugins(requested_plugins)

    if env.is_release and not signing.is_release:
        logger.warning("release_uses_debug_signing", profile=profile.name)

    plan = ResolvedPlan(
        build_type=env.build_type,
        profile=profile.name,
        application_id=profile.application_id,
        namespace=profile.namespace,
        version_code=version_code,
        version_name=version_name,
        min_sdk=min_sdk,
        target_sdk=target_sdk,
        compile_sdk=compile_sdk,
        ndk_version=profile.ndk_version,
        jvm_target=profile.jvm_target,
        signing=signing,
        minify=env.is_release,
        shrink_resources=env.is_release,
        plugin_application_order=plugin_order,
        deferred_plugins=deferred,
        dotenv_file=profile.dotenv_file,
        flutter_source=profile.flutter_source,
        apply_flutter_gradle=profile.apply_flutter_gradle,
        agp_version=profile.agp_version,
        kotlin_version=profile.kotlin_version,
        google_services_version=profile.google_services_version,
    )
    logger.debug(
        "plan_resolved",
        build_type=plan.build_type.value,
        profile=plan.profile,
        signing=plan.signing.source.value,
        plugins=list(plan.plugin_application_order),
    )
    return plan
