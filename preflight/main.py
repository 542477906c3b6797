"""
preflight — CLI entrypoint.

Usage:
    preflight                   # debug build, rebuild if stale, launch
    preflight release -f        # force a release rebuild, then launch
    preflight --dry-run --json  # report what would happen
    python -m preflight --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from preflight import __version__
from preflight.core.models.build import BuildMode, RunRequest
from preflight.core.observability.logging_config import (
    FILE_ENV,
    FILE_LEVEL_ENV,
    resolve_level,
    setup_logging,
)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="preflight")
@click.argument(
    "mode",
    type=click.Choice([m.value for m in BuildMode], case_sensitive=False),
    default=BuildMode.DEBUG.value,
    required=False,
)
@click.option(
    "--force-rebuild", "-f", "force_rebuild", is_flag=True,
    help="Rebuild even if the binary is up to date.",
)
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: the config file's directory, else cwd).",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to preflight.yml (default: <root>/preflight.yml).",
)
@click.option("--dry-run", is_flag=True, help="Report what would happen; change nothing.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON (with --dry-run).")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
def cli(
    mode: str,
    force_rebuild: bool,
    root: Path | None,
    config_path: Path | None,
    dry_run: bool,
    as_json: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Install build dependencies, rebuild if needed, and launch the application.

    MODE is ``debug`` (default) or ``release``.
    """
    if as_json and not dry_run:
        raise click.UsageError("--json requires --dry-run")

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(verbose=verbose, quiet=quiet or as_json),
        log_file=os.environ.get(FILE_ENV),
        log_file_level=os.environ.get(FILE_LEVEL_ENV),
    )

    if root is None:
        root = config_path.parent if config_path else Path.cwd()

    from preflight.core.use_cases.launch import run_launch

    request = RunRequest(mode=BuildMode(mode.lower()), force_rebuild=force_rebuild)
    result = run_launch(
        request,
        root.resolve(),
        config_path=config_path,
        dry_run=dry_run,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(result.exit_code)

    if dry_run:
        _print_dry_run(result)
    sys.exit(result.exit_code)


def _print_dry_run(result) -> None:
    """Human-readable dry-run report."""
    project = result.project
    assert project is not None

    click.secho(
        f"\n🔍 [dry-run] {project.display_name} — {result.request.mode.value}",
        fg="cyan",
        bold=True,
    )
    if result.host is not None:
        click.echo(f"   Distribution: {result.host.identity}")
    if result.capabilities is not None:
        for tool in result.capabilities.tools:
            present = result.capabilities.has(tool)
            marker = "✓" if present else "✗"
            click.secho(f"     {marker} {tool}", fg="green" if present else "red")
    if result.toolchain is not None:
        click.echo(f"   Toolchain: {result.toolchain.driver}")
    if result.decision is not None:
        label = "rebuild" if result.decision.required else "up to date"
        click.echo(f"   Binary: {label} ({result.decision.reason})")
    if result.terminal is not None:
        size = f"{result.terminal.columns}x{result.terminal.lines}"
        if result.terminal.undersized:
            click.secho(f"   Terminal: {size} (too small)", fg="yellow")
        else:
            click.echo(f"   Terminal: {size}")

    if result.planned_commands:
        click.echo()
        click.secho("   Would run:", fg="white", bold=True)
        for cmd in result.planned_commands:
            click.echo(f"     $ {' '.join(cmd)}")
    click.echo()


if __name__ == "__main__":
    cli()
