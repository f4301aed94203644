"""
buildplan CLI.

Command-line interface for resolving and rendering Flutter Android build plans.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import aiofiles
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.config import Config, get_config
from .core.exceptions import BuildPlanError
from .core.logging import bind_context, clear_context, get_logger, setup_logging
from .models.environment import BuildType
from .models.plan import ResolvedPlan
from .models.profile import ConfigurationProfile
from .services.environment import EnvironmentLoader
from .services.profiles import ProfileRegistry, load_profile_file
from .services.render import GradleRenderer
from .services.resolver import resolve

app = typer.Typer(
    name="buildplan",
    help="Resolve and render build plans for Flutter Android apps",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"buildplan v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """buildplan: build-variant resolution for Flutter Android apps."""
    pass


def _setup(verbose: bool) -> Config:
    config = get_config()
    if verbose:
        config = config.model_copy(update={"log_level": "DEBUG"})
    setup_logging(config)
    clear_context()
    return config


async def _load_profile(
    config: Config, profile_name: str | None, profile_file: Path | None
) -> ConfigurationProfile:
    if profile_file is not None:
        return await load_profile_file(profile_file)
    return ProfileRegistry.get(profile_name or config.default_profile)


async def _resolve_plan(
    config: Config,
    android_dir: Path,
    build_type: BuildType,
    plugins: list[str] | None,
    profile_name: str | None,
    profile_file: Path | None,
) -> ResolvedPlan:
    bind_context(android_dir=str(android_dir), build_type=build_type.value)
    profile = await _load_profile(config, profile_name, profile_file)
    env = await EnvironmentLoader(config.files).load(
        android_dir, build_type, dotenv_file=profile.dotenv_file
    )
    return resolve(env, plugins or config.default_plugins, profile)


async def _write_plan(plan: ResolvedPlan, output: Path) -> None:
    try:
        async with aiofiles.open(output, "w", encoding="utf-8") as f:
            await f.write(plan.model_dump_json(indent=2))
    except OSError as e:
        raise BuildPlanError(
            "Cannot write plan", context={"path": str(output)}, cause=e
        ) from e


def _fail(error: BuildPlanError) -> typer.Exit:
    logger.error("build_plan_failed", error=str(error), exit_code=error.exit_code)
    console.print(f"[bold red]✗ {escape(str(error))}[/bold red]", highlight=False)
    return typer.Exit(error.exit_code)


def _plan_table(plan: ResolvedPlan) -> Table:
    table = Table(title=f"Build Plan ({plan.build_type.value})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Profile", plan.profile)
    table.add_row("Application ID", plan.application_id)
    table.add_row("Version", f"{plan.version_name} ({plan.version_code})")
    table.add_row("SDK (min/target/compile)", f"{plan.min_sdk}/{plan.target_sdk}/{plan.compile_sdk}")
    table.add_row("Signing", plan.signing.source.value)
    if plan.signing.is_release:
        table.add_row("Key Alias", plan.signing.alias or "")
        table.add_row("Keystore", plan.signing.store_path or "")
    table.add_row("Minify", str(plan.minify))
    table.add_row("Shrink Resources", str(plan.shrink_resources))
    table.add_row("Plugin Order", " → ".join(plan.plugin_application_order) or "None")
    return table


ANDROID_DIR_ARGUMENT = typer.Argument(
    ...,
    help="Path to the Flutter project's android/ directory",
    exists=True,
    file_okay=False,
    dir_okay=True,
    resolve_path=True,
)


@app.command("resolve")
def resolve_command(
    android_dir: Path = ANDROID_DIR_ARGUMENT,
    build_type: BuildType = typer.Option(
        BuildType.DEBUG,
        "--build-type",
        "-b",
        case_sensitive=False,
        help="Build type to resolve",
    ),
    plugins: Optional[list[str]] = typer.Option(
        None,
        "--plugin",
        "-p",
        help="Plugin to apply (repeatable, in order); defaults to the standard Flutter set",
    ),
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        help="Built-in profile name",
    ),
    profile_file: Optional[Path] = typer.Option(
        None,
        "--profile-file",
        help="JSON file with a custom profile",
        exists=True,
        dir_okay=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the resolved plan as JSON (passwords masked)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """Resolve the build plan for an Android project."""
    config = _setup(verbose)

    async def run_async() -> ResolvedPlan:
        plan = await _resolve_plan(config, android_dir, build_type, plugins, profile, profile_file)
        if output is not None:
            await _write_plan(plan, output)
        return plan

    try:
        plan = asyncio.run(run_async())
    except BuildPlanError as e:
        raise _fail(e) from e

    console.print(_plan_table(plan))
    if output is not None:
        console.print(f"\n[bold]Plan written to:[/bold] {output}")


@app.command()
def render(
    android_dir: Path = ANDROID_DIR_ARGUMENT,
    build_type: BuildType = typer.Option(
        BuildType.RELEASE,
        "--build-type",
        "-b",
        case_sensitive=False,
        help="Build type to render",
    ),
    plugins: Optional[list[str]] = typer.Option(
        None,
        "--plugin",
        "-p",
        help="Plugin to apply (repeatable, in order); defaults to the standard Flutter set",
    ),
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        help="Built-in profile name",
    ),
    profile_file: Optional[Path] = typer.Option(
        None,
        "--profile-file",
        help="JSON file with a custom profile",
        exists=True,
        dir_okay=False,
    ),
    write: bool = typer.Option(
        False,
        "--write",
        help="Write the files into the android/ directory instead of printing them",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """Render Gradle build files from the resolved plan."""
    config = _setup(verbose)
    renderer = GradleRenderer(config.files)

    async def run_async() -> tuple[dict[str, str], list[Path]]:
        plan = await _resolve_plan(config, android_dir, build_type, plugins, profile, profile_file)
        rendered = renderer.render(plan)
        written = await renderer.write(rendered, android_dir) if write else []
        return rendered.files, written

    try:
        files, written = asyncio.run(run_async())
    except BuildPlanError as e:
        raise _fail(e) from e

    if write:
        console.print("[bold green]✓ Build files written[/bold green]")
        for path in written:
            console.print(f"  • {path}")
        return

    for relative, content in files.items():
        console.print(f"[bold]// {relative}[/bold]")
        console.print(content, markup=False, highlight=False, soft_wrap=True)


@app.command()
def profiles() -> None:
    """List the built-in configuration profiles."""
    table = Table(title="Configuration Profiles")
    table.add_column("Name", style="cyan")
    table.add_column("Application ID")
    table.add_column("SDK (min/target/compile)")
    table.add_column("AGP")
    table.add_column("Kotlin")

    for name in ProfileRegistry.list_profiles():
        p = ProfileRegistry.get(name)
        table.add_row(name, p.application_id, f"{p.min_sdk}/{p.target_sdk}/{p.compile_sdk}", p.agp_version, p.kotlin_version)

    console.print(table)


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
