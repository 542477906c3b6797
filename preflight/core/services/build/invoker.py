"""
Build invoker — compile the artifact when the decision says so.

A failed build is fatal.  A successful one must leave an artifact that
is newer than every input, otherwise the next run would rebuild again;
build drivers that skip relinking can leave an old timestamp behind, so
the artifact is touched forward when needed.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path

from preflight.adapters.base import CommandRunner
from preflight.core.errors import BuildError
from preflight.core.models.action import Receipt
from preflight.core.models.build import Artifact, BuildMode
from preflight.core.models.project import LaunchProject
from preflight.core.services.build.staleness import (
    RebuildDecision,
    inspect_artifact,
    newest_input_ns,
    scan_manifest,
    scan_sources,
)

logger = logging.getLogger(__name__)


@dataclass
class BuildOutcome:
    """Result of the build stage."""

    built: bool
    message: str
    artifact: Artifact
    receipts: list[Receipt] = field(default_factory=list)


def build_command(project: LaunchProject, mode: BuildMode, driver: str | None = None) -> list[str]:
    """The driver invocation for ``mode``, e.g. ``cargo build --release``."""
    settings = project.toolchain
    cmd = [driver or settings.driver, *settings.build_args]
    if mode is BuildMode.RELEASE and settings.release_flag:
        cmd.append(settings.release_flag)
    return cmd


def run_build(
    decision: RebuildDecision,
    mode: BuildMode,
    project: LaunchProject,
    project_root: Path,
    runner: CommandRunner,
    *,
    driver: str | None = None,
    search_path: str | None = None,
) -> BuildOutcome:
    """Build ``mode`` if ``decision`` requires it.

    Raises:
        BuildError: If the build command fails.
    """
    artifact_path = project.artifact_path(project_root, mode)

    if not decision.required:
        logger.info("Binary up to date, no compilation needed")
        return BuildOutcome(
            built=False,
            message="artifact up to date",
            artifact=inspect_artifact(artifact_path, mode),
        )

    if decision.forced:
        logger.info("Forced rebuild...")
    else:
        logger.debug("Rebuild required: %s", decision.reason)
    logger.info("Compiling in %s mode...", mode.value)

    receipt = runner.run(
        build_command(project, mode, driver),
        cwd=str(project_root),
        search_path=search_path,
    )
    if receipt.failed:
        raise BuildError(f"Compilation failed: {receipt.error}")

    settle_artifact_timestamp(project, project_root, artifact_path)
    logger.info("Compilation succeeded")
    return BuildOutcome(
        built=True,
        message="build succeeded",
        artifact=inspect_artifact(artifact_path, mode),
        receipts=[receipt],
    )


def settle_artifact_timestamp(
    project: LaunchProject,
    project_root: Path,
    artifact_path: Path,
) -> None:
    """Move the artifact's mtime past every input if it is not already.

    No-op when the artifact does not exist; the caller reports that.
    """
    artifact = inspect_artifact(artifact_path)
    if not artifact.exists:
        return

    newest = newest_input_ns(
        scan_manifest(project.manifest_path(project_root), project.lock_path(project_root)),
        scan_sources(project.source_root(project_root), project.source_suffixes),
    )
    assert artifact.mtime_ns is not None
    if newest is None or artifact.mtime_ns > newest:
        return

    stamp = max(time.time_ns(), newest + 1)
    logger.debug("Touching %s past newest input", artifact_path)
    os.utime(artifact_path, ns=(stamp, stamp))
