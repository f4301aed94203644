"""Test configuration for buildplan."""

import pytest
from pathlib import Path
import tempfile

from buildplan.models.environment import BuildEnvironment, BuildType


CREDENTIALS = {
    "keyAlias": "upload",
    "keyPassword": "key-secret",
    "storeFile": "/keys/upload.jks",
    "storePassword": "store-secret",
}


@pytest.fixture
def credentials():
    """A complete set of release keystore credentials."""
    return dict(CREDENTIALS)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def android_dir(temp_dir):
    """Create a Flutter project skeleton and return its android/ directory.

    The android/ directory contains a local.properties with the Flutter SDK
    path and version; no key.properties is written.

    Returns:
        Path: The android/ directory.
    """
    android = temp_dir / "android"
    (android / "app").mkdir(parents=True)
    (android / "local.properties").write_text(
        "sdk.dir=/opt/android-sdk\n"
        "flutter.sdk=/opt/flutter\n"
        "flutter.versionName=2.3.0\n"
        "flutter.versionCode=7\n",
        encoding="utf-8",
    )
    return android


@pytest.fixture
def write_key_properties(android_dir):
    """Return a helper writing key.properties into the android/ directory."""

    def _write(entries: dict) -> Path:
        path = android_dir / "key.properties"
        path.write_text("".join(f"{k}={v}\n" for k, v in entries.items()), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def debug_env():
    """A debug environment with no property files."""
    return BuildEnvironment(build_type=BuildType.DEBUG)


@pytest.fixture
def release_env():
    """A release environment with a complete key.properties."""
    return BuildEnvironment(
        build_type=BuildType.RELEASE,
        has_key_properties=True,
        key_properties=dict(CREDENTIALS),
    )


@pytest.fixture(autouse=True)
def clean_flutter_env(monkeypatch):
    """Keep Flutter overrides from the host environment out of tests."""
    for name in ("FLUTTER_MIN_SDK_VERSION", "FLUTTER_VERSION_CODE", "FLUTTER_VERSION_NAME"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_profiles():
    """Restore the profile registry after each test."""
    from buildplan.services.profiles import ProfileRegistry

    yield
    ProfileRegistry.reset()


@pytest.fixture(autouse=True)
def reset_logging_and_config():
    """Undo logging setup and cached configuration from CLI runs."""
    import structlog

    from buildplan.core.config import get_config

    get_config.cache_clear()
    yield
    structlog.reset_defaults()
    get_config.cache_clear()
