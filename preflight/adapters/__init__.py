"""Adapters — bindings to external commands and the process table.

Public re-exports for convenient access.
"""

from preflight.adapters.base import CommandRunner
from preflight.adapters.mock import MockRunner
from preflight.adapters.shell.command import ShellCommandRunner

__all__ = [
    "CommandRunner",
    "MockRunner",
    "ShellCommandRunner",
]
