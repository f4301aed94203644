"""
Gradle Rendering Service.

Renders a ResolvedPlan into the Kotlin DSL build files of a Flutter Android
project: the app module's build.gradle.kts and the root build.gradle.kts.
"""

from __future__ import annotations

from pathlib import Path

import aiofiles
from pydantic import BaseModel, Field

from ...core.config import FilesConfig
from ...core.exceptions import BuildPlanError
from ...core.logging import get_logger
from ...models.plan import ResolvedPlan

logger = get_logger(__name__)

_CREDENTIAL_LINES = (
    'keyAlias = keystoreProperties["keyAlias"] as String',
    'keyPassword = keystoreProperties["keyPassword"] as String',
    'storeFile = file(keystoreProperties["storeFile"] as String)',
    'storePassword = keystoreProperties["storePassword"] as String',
)


class RenderedBuild(BaseModel):
    """Rendered Gradle files, keyed by path relative to the android/ directory."""

    files: dict[str, str] = Field(default_factory=dict)


def kotlin_string(value: str) -> str:
    """Quote a value as a Kotlin string literal, escaping templates and quotes."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")
    return f'"{escaped}"'


def java_version(jvm_target: str) -> str:
    """Map a jvmTarget string to its JavaVersion constant (e.g. "1.8" -> VERSION_1_8)."""
    return "JavaVersion.VERSION_" + jvm_target.replace(".", "_")


class GradleRenderer:
    """Renders and writes Gradle build files for a resolved plan."""

    def __init__(self, files: FilesConfig | None = None) -> None:
        """Initialize the renderer.

        Args:
            files: File names; the key.properties name is embedded in the
                rendered signing config.
        """
        self.files = files or FilesConfig()

    def _create_keystore_loader(self) -> str:
        return f'''
val keystoreProperties = java.util.Properties()
val keystorePropertiesFile = rootProject.file({kotlin_string(self.files.key_properties)})
if (keystorePropertiesFile.exists()) {{
    keystoreProperties.load(java.io.FileInputStream(keystorePropertiesFile))
}}
'''

    def _create_flutter_gradle_apply(self) -> str:
        return f'''
fun localProperties(): java.util.Properties {{
    val properties = java.util.Properties()
    val localPropertiesFile = project.rootProject.file({kotlin_string(self.files.local_properties)})
    if (localPropertiesFile.exists()) {{
        properties.load(java.io.FileInputStream(localPropertiesFile))
    }}
    return properties
}}

val flutterRoot: String = localProperties().getProperty("flutter.sdk")
    ?: throw GradleException("Flutter SDK not found. Define flutter.sdk in local.properties.")
apply(from = "$flutterRoot/packages/flutter_tools/gradle/flutter.gradle")
'''

    def _create_build_type_block(self, plan: ResolvedPlan) -> str:
        signing_config = "release" if plan.signing.is_release else "debug"
        return f'''    buildTypes {{
        {plan.build_type.value} {{
            isMinifyEnabled = {str(plan.minify).lower()}
            isShrinkResources = {str(plan.shrink_resources).lower()}
            signingConfig = signingConfigs.getByName("{signing_config}")
        }}
    }}'''

    def render_app_build_gradle(self, plan: ResolvedPlan) -> str:
        """Generate the app module's build.gradle.kts content."""
        plugins_block = "\n    ".join(f"id({kotlin_string(p)})" for p in plan.eager_plugins)

        keystore_loader = self._create_keystore_loader() if plan.signing.is_release else ""
        dotenv_line = ""
        if plan.dotenv_file:
            dotenv_line = f'''
// Load .env file for build-time variables
project.ext.set("flutter.dotenv", {kotlin_string(plan.dotenv_file)})
'''
        flutter_gradle = self._create_flutter_gradle_apply() if plan.apply_flutter_gradle else ""

        ndk_line = f"\n    ndkVersion = {kotlin_string(plan.ndk_version)}" if plan.ndk_version else ""

        signing_block = ""
        if plan.signing.is_release:
            credentials = "\n            ".join(_CREDENTIAL_LINES)
            signing_block = f'''
    signingConfigs {{
        create("release") {{
            {credentials}
        }}
    }}
'''

        deferred_block = ""
        if plan.deferred_plugins:
            applies = "\n".join(f"apply(plugin = {kotlin_string(p)})" for p in plan.deferred_plugins)
            deferred_block = f'''
// Applied last so the Flutter plugin loader's variables are set first
{applies}
'''

        return f'''plugins {{
    {plugins_block}
}}
{keystore_loader}{dotenv_line}{flutter_gradle}
android {{
    namespace = {kotlin_string(plan.namespace)}
    compileSdk = {plan.compile_sdk}{ndk_line}

    compileOptions {{
        sourceCompatibility = {java_version(plan.jvm_target)}
        targetCompatibility = {java_version(plan.jvm_target)}
    }}

    kotlinOptions {{
        jvmTarget = {kotlin_string(plan.jvm_target)}
    }}

    sourceSets {{
        getByName("main") {{
            java.srcDirs("src/main/kotlin", "src/main/java")
        }}
    }}

    defaultConfig {{
        applicationId = {kotlin_string(plan.application_id)}
        minSdk = {plan.min_sdk}
        targetSdk = {plan.target_sdk}
        versionCode = {plan.version_code}
        versionName = {kotlin_string(plan.version_name)}
    }}
{signing_block}
{self._create_build_type_block(plan)}
}}

flutter {{
    source = {kotlin_string(plan.flutter_source)}
}}

dependencies {{}}
{deferred_block}'''

    def render_root_build_gradle(self, plan: ResolvedPlan) -> str:
        """Generate the root build.gradle.kts content."""
        classpath = [
            "classpath(" + kotlin_string(f"com.android.tools.build:gradle:{plan.agp_version}") + ")",
            'classpath("org.jetbrains.kotlin:kotlin-gradle-plugin:$kotlin_version")',
        ]
        if plan.deferred_plugins:
            classpath.append(
                "classpath(" + kotlin_string(f"com.google.gms:google-services:{plan.google_services_version}") + ")"
            )
        classpath_block = "\n        ".join(classpath)

        return f'''buildscript {{
    val kotlin_version = {kotlin_string(plan.kotlin_version)}

    repositories {{
        google()
        mavenCentral()
    }}

    dependencies {{
        {classpath_block}
    }}
}}

allprojects {{
    repositories {{
        google()
        mavenCentral()
    }}
}}

val newBuildDir: Directory = rootProject.layout.buildDirectory
    .dir("../../build")
    .get()
rootProject.layout.buildDirectory.value(newBuildDir)

subprojects {{
    val newSubprojectBuildDir: Directory = newBuildDir.dir(project.name)
    project.layout.buildDirectory.value(newSubprojectBuildDir)
}}
subprojects {{
    project.evaluationDependsOn({kotlin_string(":" + self.files.app_module)})
}}

tasks.register<Delete>("clean") {{
    delete(rootProject.layout.buildDirectory)
}}
'''

    def render(self, plan: ResolvedPlan) -> RenderedBuild:
        """Render all build files for a plan."""
        return RenderedBuild(
            files={
                f"{self.files.app_module}/build.gradle.kts": self.render_app_build_gradle(plan),
                "build.gradle.kts": self.render_root_build_gradle(plan),
            }
        )

    async def write(self, rendered: RenderedBuild, android_dir: Path) -> list[Path]:
        """Write rendered files under an android/ directory.

        Args:
            rendered: Output of render().
            android_dir: Destination directory.

        Returns:
            Paths of the written files.

        Raises:
            BuildPlanError: If a file cannot be written.
        """
        written: list[Path] = []
        for relative, content in rendered.files.items():
            path = android_dir / relative
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                async with aiofiles.open(path, "w", encoding="utf-8") as f:
                    await f.write(content)
            except OSError as e:
                raise BuildPlanError(
                    f"Cannot write {relative}", context={"path": str(path)}, cause=e
                ) from e
            logger.info("build_file_written", path=str(path))
            written.append(path)
        return written
