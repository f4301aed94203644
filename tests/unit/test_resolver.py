"""Unit tests for the build configuration resolver."""

import pytest

from buildplan.core.exceptions import ConfigError, ConfigErrorKind
from buildplan.models.environment import BuildEnvironment, BuildType
from buildplan.models.plan import SigningSource
from buildplan.models.profile import BUILTIN_PROFILES, ConfigurationProfile
from buildplan.services.resolver import order_plugins, resolve


PLUGINS = ["com.android.application", "kotlin-android", "dev.flutter.flutter-plugin-loader"]


class TestDebugBuilds:
    """Tests for debug build resolution."""

    def test_debug_disables_optimization(self, debug_env):
        """Debug builds never minify or shrink resources."""
        plan = resolve(debug_env, PLUGINS)
        assert plan.minify is False
        assert plan.shrink_resources is False

    def test_debug_uses_fallback_signing(self, credentials):
        """Debug builds ignore key.properties, even when complete."""
        env = BuildEnvironment(
            build_type=BuildType.DEBUG,
            has_key_properties=True,
            key_properties=dict(credentials),
        )
        plan = resolve(env, PLUGINS)
        assert plan.signing.source == SigningSource.DEBUG_FALLBACK
        assert plan.signing.alias is None


class TestReleaseSigning:
    """Tests for release signing resolution."""

    def test_release_with_all_credentials(self, release_env):
        """All four fields present yields the release keystore, values intact."""
        plan = resolve(release_env, PLUGINS)
        signing = plan.signing
        assert signing.source == SigningSource.RELEASE_KEYSTORE
        assert signing.alias == "upload"
        assert signing.password.get_secret_value() == "key-secret"
        assert signing.store_path == "/keys/upload.jks"
        assert signing.store_password.get_secret_value() == "store-secret"

    def test_release_enables_optimization(self, release_env):
        """Release builds minify and shrink resources."""
        plan = resolve(release_env, PLUGINS)
        assert plan.minify is True
        assert plan.shrink_resources is True

    @pytest.mark.parametrize(
        "present",
        [
            ["keyAlias"],
            ["keyAlias", "keyPassword"],
            ["keyAlias", "keyPassword", "storeFile"],
            ["storePassword"],
            ["keyPassword", "storeFile", "storePassword"],
        ],
    )
    def test_partial_credentials_fail(self, credentials, present):
        """One to three credential fields is an incomplete credential set."""
        env = BuildEnvironment(
            build_type=BuildType.RELEASE,
            has_key_properties=True,
            key_properties={k: credentials[k] for k in present},
        )
        with pytest.raises(ConfigError) as exc_info:
            resolve(env, PLUGINS)
        assert exc_info.value.kind == ConfigErrorKind.INCOMPLETE_CREDENTIALS
        assert exc_info.value.exit_code == 2
        for key in credentials:
            if key not in present:
                assert key in exc_info.value.context["missing"]

    def test_blank_value_counts_as_missing(self, credentials):
        """A key set to whitespace is not a credential."""
        creds = dict(credentials, storePassword="   ")
        env = BuildEnvironment(
            build_type=BuildType.RELEASE, has_key_properties=True, key_properties=creds
        )
        with pytest.raises(ConfigError) as exc_info:
            resolve(env, PLUGINS)
        assert exc_info.value.context["missing"] == ["storePassword"]

    def test_release_without_key_properties_falls_back(self):
        """Release without key.properties signs with the debug keystore."""
        env = BuildEnvironment(build_type=BuildType.RELEASE)
        plan = resolve(env, PLUGINS)
        assert plan.signing.source == SigningSource.DEBUG_FALLBACK
        assert plan.minify is True

    def test_key_properties_without_credentials_falls_back(self):
        """key.properties with none of the four fields falls back too."""
        env = BuildEnvironment(
            build_type=BuildType.RELEASE,
            has_key_properties=True,
            key_properties={"unrelated": "value"},
        )
        plan = resolve(env, PLUGINS)
        assert plan.signing.source == SigningSource.DEBUG_FALLBACK


class TestSdkResolution:
    """Tests for SDK level resolution."""

    def test_profile_defaults(self, debug_env):
        """SDK levels come from the profile when nothing overrides them."""
        plan = resolve(debug_env, PLUGINS)
        assert (plan.min_sdk, plan.target_sdk, plan.compile_sdk) == (21, 34, 34)

    def test_min_sdk_from_local_properties(self):
        """flutter.minSdkVersion in local.properties overrides the default."""
        env = BuildEnvironment(
            build_type=BuildType.DEBUG,
            has_local_properties=True,
            local_properties={"flutter.minSdkVersion": "26"},
        )
        assert resolve(env, PLUGINS).min_sdk == 26

    def test_env_var_beats_local_properties(self):
        """The environment variable takes precedence over local.properties."""
        env = BuildEnvironment(
            build_type=BuildType.DEBUG,
            has_local_properties=True,
            local_properties={"flutter.minSdkVersion": "26"},
            env_vars={"FLUTTER_MIN_SDK_VERSION": "24"},
        )
        assert resolve(env, PLUGINS).min_sdk == 24

    def test_min_sdk_above_target_fails(self):
        """minSdk greater than targetSdk is an ordering violation."""
        env = BuildEnvironment(
            build_type=BuildType.DEBUG, env_vars={"FLUTTER_MIN_SDK_VERSION": "35"}
        )
        with pytest.raises(ConfigError) as exc_info:
            resolve(env, PLUGINS)
        assert exc_info.value.kind == ConfigErrorKind.SDK_ORDERING_VIOLATION
        assert exc_info.value.exit_code == 3

    def test_profile_target_above_compile_fails(self, debug_env):
        """A profile with targetSdk above compileSdk is rejected at resolution."""
        profile = ConfigurationProfile(
            name="broken",
            application_id="com.example.broken",
            namespace="com.example.broken",
            compile_sdk=33,
            target_sdk=34,
        )
        with pytest.raises(ConfigError) as exc_info:
            resolve(debug_env, PLUGINS, profile)
        assert exc_info.value.kind == ConfigErrorKind.SDK_ORDERING_VIOLATION

    def test_non_integer_min_sdk_fails(self):
        """A non-numeric override is an invalid value."""
        env = BuildEnvironment(
            build_type=BuildType.DEBUG, env_vars={"FLUTTER_MIN_SDK_VERSION": "twenty"}
        )
        with pytest.raises(ConfigError) as exc_info:
            resolve(env, PLUGINS)
        assert exc_info.value.kind == ConfigErrorKind.INVALID_VALUE
        assert exc_info.value.exit_code == 5

    def test_other_profile(self, debug_env):
        """Profiles carry their own SDK levels and identity."""
        plan = resolve(debug_env, PLUGINS, BUILTIN_PROFILES["flutter-35"])
        assert (plan.min_sdk, plan.target_sdk, plan.compile_sdk) == (23, 35, 35)
        assert plan.profile == "flutter-35"


class TestVersioning:
    """Tests for version code and name resolution."""

    def test_defaults(self, debug_env):
        """Without overrides the version is 1 / 1.0."""
        plan = resolve(debug_env, PLUGINS)
        assert plan.version_code == 1
        assert plan.version_name == "1.0"

    def test_from_local_properties(self):
        """flutter.versionCode and flutter.versionName are honored."""
        env = BuildEnvironment(
            build_type=BuildType.DEBUG,
            has_local_properties=True,
            local_properties={"flutter.versionCode": "12", "flutter.versionName": "3.1.4"},
        )
        plan = resolve(env, PLUGINS)
        assert plan.version_code == 12
        assert plan.version_name == "3.1.4"

    @pytest.mark.parametrize("value", ["0", "-3", "1.5"])
    def test_invalid_version_code(self, value):
        """Version codes must be integers of at least 1."""
        env = BuildEnvironment(build_type=BuildType.DEBUG, env_vars={"FLUTTER_VERSION_CODE": value})
        with pytest.raises(ConfigError) as exc_info:
            resolve(env, PLUGINS)
        assert exc_info.value.kind == ConfigErrorKind.INVALID_VALUE


class TestPluginOrdering:
    """Tests for plugin application order."""

    def test_example_order(self):
        """Google services moves to the end; the rest keep their order."""
        env = BuildEnvironment(
            build_type=BuildType.RELEASE,
            has_key_properties=True,
            key_properties={
                "keyAlias": "a",
                "keyPassword": "b",
                "storeFile": "s.jks",
                "storePassword": "c",
            },
        )
        plugins = ["android-app", "kotlin", "google-services", "flutter-plugin-loader"]
        plan = resolve(env, plugins)
        assert plan.plugin_application_order == (
            "android-app",
            "kotlin",
            "flutter-plugin-loader",
            "google-services",
        )
        assert plan.deferred_plugins == ("google-services",)
        assert plan.signing.source == SigningSource.RELEASE_KEYSTORE

    @pytest.mark.parametrize("position", [0, 1, 2, 3])
    def test_google_services_always_last(self, debug_env, position):
        """Whatever its requested position, google-services is applied last."""
        plugins = list(PLUGINS)
        plugins.insert(position, "com.google.gms.google-services")
        plan = resolve(debug_env, plugins)
        assert plan.plugin_application_order[-1] == "com.google.gms.google-services"
        assert list(plan.plugin_application_order[:-1]) == PLUGINS

    def test_without_google_services(self, debug_env):
        """Without google-services the order is unchanged."""
        plan = resolve(debug_env, PLUGINS)
        assert list(plan.plugin_application_order) == PLUGINS
        assert plan.deferred_plugins == ()

    def test_duplicate_plugin_fails(self, debug_env):
        """Requesting the same plugin twice is rejected."""
        with pytest.raises(ConfigError) as exc_info:
            resolve(debug_env, ["kotlin-android", "com.android.application", "kotlin-android"])
        assert exc_info.value.kind == ConfigErrorKind.DUPLICATE_PLUGIN
        assert exc_info.value.exit_code == 4
        assert exc_info.value.context["duplicates"] == ["kotlin-android"]

    def test_duplicate_checked_before_credentials(self):
        """Duplicate plugins are reported even when credentials are also broken."""
        env = BuildEnvironment(
            build_type=BuildType.RELEASE,
            has_key_properties=True,
            key_properties={"keyAlias": "a"},
        )
        with pytest.raises(ConfigError) as exc_info:
            resolve(env, ["a", "a"])
        assert exc_info.value.kind == ConfigErrorKind.DUPLICATE_PLUGIN

    def test_order_plugins_empty(self):
        """An empty request yields an empty order."""
        assert order_plugins([]) == ((), ())


class TestDeterminism:
    """Tests for resolution purity."""

    def test_idempotent(self, release_env):
        """Resolving twice with the same inputs gives equal plans."""
        plugins = PLUGINS + ["com.google.gms.google-services"]
        first = resolve(release_env, plugins)
        second = resolve(release_env, plugins)
        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_does_not_mutate_request(self, debug_env):
        """The caller's plugin list is left untouched."""
        plugins = ["google-services", "kotlin-android"]
        resolve(debug_env, plugins)
        assert plugins == ["google-services", "kotlin-android"]
