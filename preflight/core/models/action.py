"""
Receipt model — the outcome of one external command.

Every package-manager call, installer download, and compilation goes
through a command runner, and the runner answers with a Receipt.
Never exceptions: a missing binary, a timeout, or a non-zero exit
status all come back as ``status="failed"``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Result of running an external command."""

    runner: str
    command: list[str] = Field(default_factory=list)
    status: Literal["ok", "failed"] = "ok"
    returncode: int | None = None

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the command succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the command failed."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        runner: str,
        command: list[str],
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            runner=runner,
            command=command,
            status="ok",
            returncode=kwargs.pop("returncode", 0),
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        runner: str,
        command: list[str],
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            runner=runner,
            command=command,
            status="failed",
            error=error,
            **kwargs,
        )
