"""
Launcher — transfer control to the built application.

The artifact must exist and be executable.  The launcher then replaces
its own process with it; the resolved search path becomes the
application's PATH so the toolchain directories stay visible.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping, Sequence

from preflight.adapters.shell.process import replace_process
from preflight.core.errors import LaunchError
from preflight.core.models.build import Artifact
from preflight.core.observability.logging_config import flush_logging

logger = logging.getLogger(__name__)

Execute = Callable[[Sequence[str], Mapping[str, str]], None]


def verify_artifact(artifact: Artifact, hint: str) -> None:
    """Raise LaunchError unless the artifact is an executable file."""
    if not artifact.exists:
        raise LaunchError(
            f"Binary not found: {artifact.path}. Try building manually: {hint}"
        )
    if not artifact.executable:
        raise LaunchError(
            f"Binary is not executable: {artifact.path}. Try building manually: {hint}"
        )


def launch(
    artifact: Artifact,
    *,
    search_path: str,
    hint: str,
    execute: Execute | None = None,
) -> None:
    """Replace the current process with the artifact.

    Only returns when ``execute`` is a test double.

    Raises:
        LaunchError: If the artifact is unusable or cannot be executed.
    """
    verify_artifact(artifact, hint)

    env = dict(os.environ)
    env["PATH"] = search_path
    argv = [str(artifact.path)]

    flush_logging()
    try:
        (execute or replace_process)(argv, env)
    except OSError as e:
        raise LaunchError(f"Cannot start {artifact.path}: {e}") from e
