"""
mlinstall — CLI entrypoint.

Usage:
    mlinstall              # same as `mlinstall install`
    mlinstall install
    mlinstall detect --json
"""

from __future__ import annotations

import json
import os
import shutil
import sys
from pathlib import Path

import click

from mlinstall import __version__
from mlinstall.adapters.platform_probe import HostPlatformProbe
from mlinstall.adapters.prompt import ClickPrompter
from mlinstall.adapters.shell.command import SubprocessRunner
from mlinstall.core.config.loader import ConfigError, load_settings
from mlinstall.core.engine.orchestrator import Installer
from mlinstall.core.errors import InstallerError, MissingPrerequisiteError
from mlinstall.core.models.settings import InstallerSettings
from mlinstall.core.observability.logging_config import (
    INSTALL_LOG_NAME,
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    log_to_root_directory,
    resolve_level,
    setup_logging,
)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mlinstall")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to installer.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Install a pinned machine-learning application into its own virtual environment."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(install)


def _settings(ctx: click.Context) -> InstallerSettings:
    try:
        return load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def _report_failure(error: InstallerError) -> None:
    click.echo()
    click.secho(f"❌ {error}", fg="red", bold=True)
    if error.guidance:
        click.echo(error.guidance)


@cli.command()
@click.pass_context
def install(ctx: click.Context) -> None:
    """Run the interactive installer."""
    settings = _settings(ctx)
    quiet = ctx.obj.get("quiet", False)
    prompter = ClickPrompter()

    def progress(message: str) -> None:
        if not quiet:
            click.secho(f"   → {message}", fg="cyan")

    click.secho(f"\n⚡ {settings.app_name} {settings.app_version} installer", bold=True)
    click.echo("   A virtual environment, dependencies and launcher scripts will be")
    click.echo("   set up in a root directory of your choice.")
    click.echo()
    prompter.pause("Press any key to start the installation, or Ctrl-C to cancel...")

    installer = Installer(
        settings,
        SubprocessRunner(),
        prompter,
        HostPlatformProbe(),
        which=shutil.which,
        progress=progress,
        # an explicit MLI_LOG_FILE replaces <root>/install.log
        on_root=None if os.environ.get(LOG_FILE_ENV) else log_to_root_directory,
    )

    try:
        report = installer.run()
    except InstallerError as e:
        _report_failure(e)
        if installer.report.root and not os.environ.get(LOG_FILE_ENV):
            click.echo(f"Install log: {Path(installer.report.root) / INSTALL_LOG_NAME}")
        if e.pause:
            prompter.pause("Press any key to exit...")
        sys.exit(1)

    root = Path(report.root)
    click.echo()
    click.secho(f"✅ {settings.app_name} is installed in {root}", fg="green", bold=True)
    click.echo(f"   Start it with: {root / 'invoke.sh'}")
    click.echo(f"   Update it with: {root / 'update.sh'}")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show the platform, interpreter and manifest an install would use."""
    from mlinstall.core.services.interpreter import discover_interpreter
    from mlinstall.core.services.manifests import select_manifest
    from mlinstall.core.services.platform_detect import detect_platform

    settings = _settings(ctx)

    try:
        platform = detect_platform(HostPlatformProbe())
    except InstallerError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            _report_failure(e)
        sys.exit(1)

    interpreter = None
    error = None
    try:
        interpreter = discover_interpreter(
            settings.python_candidates,
            settings.minimum_python,
            SubprocessRunner(),
            which=shutil.which,
        )
    except MissingPrerequisiteError as e:
        error = str(e)

    manifest = select_manifest(platform)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "platform": platform.model_dump(),
                    "interpreter": interpreter.model_dump() if interpreter else None,
                    "manifest": manifest,
                    "error": error,
                },
                indent=2,
            )
        )
        sys.exit(1 if error else 0)

    click.secho(f"\n🔍 {settings.app_name} {settings.app_version}", fg="cyan", bold=True)
    click.echo(f"   OS:           {platform.os_family}")
    click.echo(f"   Architecture: {platform.arch}")
    click.echo(f"   GPU:          {platform.gpu}")
    click.echo(f"   Manifest:     {manifest}")
    if interpreter:
        click.echo(f"   Python:       {interpreter.path} ({interpreter.version})")
    else:
        click.secho(f"   Python:       ✗ {error}", fg="red")
        click.echo()
        sys.exit(1)
    click.echo()


if __name__ == "__main__":
    cli()
