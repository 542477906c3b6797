"""
Launch use case — the pre-flight pipeline from bare host to running app.

Host identity → capabilities → provisioning → toolchain → staleness →
build → terminal check → exec.  Every stage either completes, warns and
continues, or raises a PreflightError that ends the run with status 1.

In dry-run mode only the read-only stages run; the commands the other
stages would execute are collected instead.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from preflight.adapters.base import CommandRunner
from preflight.core.config.loader import ConfigError, load_config
from preflight.core.errors import LaunchError, ManifestMissingError, PreflightError
from preflight.core.models.build import Artifact, RunRequest
from preflight.core.models.host import CapabilitySet, HostProfile
from preflight.core.models.project import LaunchProject
from preflight.core.services.build.invoker import build_command, run_build
from preflight.core.services.build.staleness import (
    RebuildDecision,
    decide_rebuild,
    inspect_artifact,
    scan_manifest,
    scan_sources,
)
from preflight.core.services.launcher import Execute, launch
from preflight.core.services.terminal_ops import (
    Confirm,
    SizeProbe,
    TerminalCheck,
    check_terminal,
)
from preflight.core.services.tool_install.detection.capabilities import probe_capabilities
from preflight.core.services.tool_install.detection.host import (
    DEFAULT_PROBES,
    HostProbe,
    identify_host,
)
from preflight.core.services.tool_install.execution.provisioner import (
    ProvisioningOutcome,
    plan_provisioning,
    provision_dependencies,
)
from preflight.core.services.tool_install.execution.toolchain import (
    ToolchainStatus,
    ensure_toolchain,
    installer_commands,
    resolve_toolchain,
)

logger = logging.getLogger(__name__)


@dataclass
class LaunchResult:
    """Everything the pipeline found and did."""

    request: RunRequest
    project_root: Path
    dry_run: bool = False
    project: LaunchProject | None = None
    host: HostProfile | None = None
    capabilities: CapabilitySet | None = None
    provisioning: ProvisioningOutcome | None = None
    toolchain: ToolchainStatus | None = None
    decision: RebuildDecision | None = None
    built: bool = False
    artifact: Artifact | None = None
    terminal: TerminalCheck | None = None
    planned_commands: list[list[str]] = field(default_factory=list)
    launched: bool = False
    cancelled: bool = False
    error: str | None = None
    exit_code: int = 0

    def to_dict(self) -> dict:
        result: dict = {
            "mode": self.request.mode.value,
            "force_rebuild": self.request.force_rebuild,
            "project_root": str(self.project_root),
            "dry_run": self.dry_run,
        }
        if self.error:
            result["error"] = self.error
        if self.host is not None:
            result["host"] = {"identity": self.host.identity, "source": self.host.source}
        if self.capabilities is not None:
            result["capabilities"] = self.capabilities.to_dict()
        if self.provisioning is not None:
            result["provisioning"] = self.provisioning.to_dict()
        if self.toolchain is not None:
            result["toolchain"] = self.toolchain.to_dict()
        if self.decision is not None:
            result["rebuild"] = {
                "required": self.decision.required,
                "reason": self.decision.reason,
            }
        if self.artifact is not None:
            result["artifact"] = {
                "path": str(self.artifact.path),
                "exists": self.artifact.exists,
            }
        if self.terminal is not None:
            result["terminal"] = self.terminal.to_dict()
        result["planned_commands"] = self.planned_commands
        result["built"] = self.built
        result["cancelled"] = self.cancelled
        result["exit_code"] = self.exit_code
        return result


def run_launch(
    request: RunRequest,
    project_root: Path,
    *,
    config_path: Path | None = None,
    dry_run: bool = False,
    runner: CommandRunner | None = None,
    host_probes: Sequence[HostProbe] = DEFAULT_PROBES,
    host_root: Path = Path("/"),
    home: Path | None = None,
    search_path: str | None = None,
    is_root: bool | None = None,
    size_probe: SizeProbe | None = None,
    confirm: Confirm | None = None,
    execute: Execute | None = None,
) -> LaunchResult:
    """Run the pre-flight pipeline and hand over to the application.

    With the default ``execute`` this does not return on success: the
    process is replaced.  Every collaborator with a side effect can be
    injected.

    Args:
        request: Build mode and force flag.
        project_root: Directory holding the manifest and sources.
        config_path: Explicit ``preflight.yml``.
        dry_run: Only run the read-only stages and collect commands.
        runner: Runs external commands (default: ShellCommandRunner).
        host_probes: Host identity probes in priority order.
        host_root: Root the identity descriptor paths are relative to.
        home: Home directory for the toolchain descriptor.
        search_path: Initial PATH for tool resolution.
        is_root: Override privilege detection.
        size_probe: Terminal size probe.
        confirm: Undersized-terminal prompt.
        execute: Process replacement.

    Returns:
        LaunchResult; ``exit_code`` is 0 on success or user cancel, 1 on
        any fatal failure.
    """
    result = LaunchResult(request=request, project_root=project_root, dry_run=dry_run)

    if runner is None:
        from preflight.adapters.shell.command import ShellCommandRunner

        runner = ShellCommandRunner()

    try:
        result.project = load_config(project_root, config_path)
        _run_pipeline(
            result,
            result.project,
            runner=runner,
            host_probes=host_probes,
            host_root=host_root,
            home=home if home is not None else Path.home(),
            search_path=(
                search_path if search_path is not None else os.environ.get("PATH", os.defpath)
            ),
            is_root=is_root,
            size_probe=size_probe,
            confirm=confirm,
            execute=execute,
        )
    except (ConfigError, PreflightError) as e:
        logger.error("%s", e)
        result.error = str(e)
        result.exit_code = e.exit_code

    return result


def _run_pipeline(
    result: LaunchResult,
    project: LaunchProject,
    *,
    runner: CommandRunner,
    host_probes: Sequence[HostProbe],
    host_root: Path,
    home: Path,
    search_path: str,
    is_root: bool | None,
    size_probe: SizeProbe | None,
    confirm: Confirm | None,
    execute: Execute | None,
) -> None:
    root = result.project_root
    mode = result.request.mode
    dry_run = result.dry_run
    timeout = project.command_timeout

    # ── Host + capabilities ─────────────────────────────────────
    logger.info("Checking dependencies...")
    result.host = identify_host(host_probes, root=host_root)
    if result.host.is_known:
        logger.info("Distribution detected: %s", result.host.identity)
    else:
        logger.warning("Could not identify the distribution")
    result.capabilities = probe_capabilities(project.required_tools, search_path)

    # ── Provisioning (non-fatal) ────────────────────────────────
    if dry_run:
        plan = plan_provisioning(
            result.host, result.capabilities, search_path=search_path, is_root=is_root,
        )
        result.planned_commands.extend(plan.commands)
        if plan.action in ("skip", "block"):
            logger.warning(plan.reason)
    else:
        result.provisioning = provision_dependencies(
            result.host,
            result.capabilities,
            runner,
            required_tools=project.required_tools,
            search_path=search_path,
            is_root=is_root,
            timeout=timeout,
        )
        result.capabilities = result.provisioning.capabilities
        if not result.provisioning.ok:
            logger.warning("Some dependencies could not be installed automatically")
            logger.warning("Continuing, but compilation may fail")

    # ── Toolchain (fatal) ───────────────────────────────────────
    if dry_run:
        driver, path = resolve_toolchain(project.toolchain, search_path, home)
        if driver is None:
            result.planned_commands.extend(installer_commands(project.toolchain, project.fetcher))
        result.toolchain = ToolchainStatus(driver=driver or project.toolchain.driver, search_path=path)
    else:
        result.toolchain = ensure_toolchain(
            project.toolchain,
            runner,
            search_path=search_path,
            home=home,
            fetcher=project.fetcher,
            timeout=timeout,
        )
    search_path = result.toolchain.search_path

    # ── Staleness ───────────────────────────────────────────────
    logger.info("Checking project...")
    manifest_path = project.manifest_path(root)
    if not manifest_path.is_file():
        raise ManifestMissingError(f"{project.manifest} not found in {root}")

    artifact_path = project.artifact_path(root, mode)
    result.decision = decide_rebuild(
        result.request,
        scan_manifest(manifest_path, project.lock_path(root)),
        scan_sources(project.source_root(root), project.source_suffixes),
        inspect_artifact(artifact_path, mode),
    )

    # ── Build (fatal) ───────────────────────────────────────────
    hint = project.manual_build_hint(mode)
    if dry_run:
        if result.decision.required:
            result.planned_commands.append(build_command(project, mode))
        result.artifact = inspect_artifact(artifact_path, mode)
    else:
        outcome = run_build(
            result.decision,
            mode,
            project,
            root,
            runner,
            driver=result.toolchain.driver,
            search_path=search_path,
        )
        result.built = outcome.built
        result.artifact = outcome.artifact
        if not result.artifact.exists:
            raise LaunchError(f"Binary not found: {artifact_path}. Try building manually: {hint}")

    # ── Terminal ────────────────────────────────────────────────
    result.terminal = check_terminal(
        project.terminal,
        size_probe=size_probe,
        confirm=confirm,
        interactive=not dry_run,
    )
    if dry_run:
        return
    if not result.terminal.proceed:
        logger.info("Cancelled by user")
        result.cancelled = True
        return

    # ── Launch ──────────────────────────────────────────────────
    logger.info("Launching %s...", project.display_name)
    logger.info("Mode: %s", mode.value)
    logger.info("Terminal size: %dx%d", result.terminal.columns, result.terminal.lines)
    launch(result.artifact, search_path=search_path, hint=hint, execute=execute)
    result.launched = True
