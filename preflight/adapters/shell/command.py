"""
Shell command runner — the single place external commands are spawned.

Package managers, the toolchain installer and the compiler all run
through here.  Output is passed through to the terminal unless the
caller asks to capture it, so the user sees installer and compiler
progress as it happens.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from collections.abc import Sequence
from datetime import UTC, datetime

from preflight.adapters.base import CommandRunner
from preflight.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellCommandRunner(CommandRunner):
    """Run commands with ``subprocess.run`` and report a Receipt."""

    @property
    def name(self) -> str:
        return "shell"

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: str | None = None,
        search_path: str | None = None,
        input_text: str | None = None,
        capture: bool = False,
        timeout: int | None = None,
    ) -> Receipt:
        cmd = list(command)

        # ── Environment ──
        env = os.environ.copy()
        if search_path is not None:
            env["PATH"] = search_path

        logger.debug("Executing: %s (cwd=%s)", shlex.join(cmd), cwd or ".")
        started_at = _now()
        start = time.monotonic()

        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                env=env,
                input=input_text,
                capture_output=capture,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                runner=self.name,
                command=cmd,
                error=f"Command timed out after {timeout}s",
                started_at=started_at,
                ended_at=_now(),
                metadata={"timeout": timeout},
            )
        except OSError as e:
            return Receipt.failure(
                runner=self.name,
                command=cmd,
                error=f"Cannot execute {cmd[0]}: {e}",
                started_at=started_at,
                ended_at=_now(),
            )

        ended_at = _now()
        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = result.stdout or ""
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return Receipt.success(
                runner=self.name,
                command=cmd,
                output=stdout,
                duration_ms=elapsed_ms,
                started_at=started_at,
                ended_at=ended_at,
                metadata={"stderr": stderr} if stderr else {},
            )

        return Receipt.failure(
            runner=self.name,
            command=cmd,
            error=stderr or f"Command exited with code {result.returncode}",
            returncode=result.returncode,
            duration_ms=elapsed_ms,
            started_at=started_at,
            ended_at=ended_at,
            output=stdout,
        )


def _now() -> str:
    return datetime.now(UTC).isoformat()
