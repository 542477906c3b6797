"""
Runner base — the contract between pipeline stages and external commands.

Stages never call ``subprocess`` themselves.  They hand a command to a
CommandRunner and inspect the Receipt that comes back, which keeps
every stage testable with the MockRunner.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from preflight.core.models.action import Receipt


class CommandRunner(ABC):
    """Abstract base class for command runners.

    Runners perform external side effects and return receipts.
    They NEVER raise for a failing command — failures are captured
    in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
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
        """Run ``command`` to completion and return a receipt.

        Args:
            command: Program and arguments.
            cwd: Working directory.
            search_path: PATH for the child; the current PATH when None.
            input_text: Text fed to the child's stdin.
            capture: Capture stdout/stderr instead of passing them
                through to the terminal.
            timeout: Seconds before giving up; None waits indefinitely.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
