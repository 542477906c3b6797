"""
Terminal operations — make sure the terminal can host the application.

Reads the terminal size and, when it is below the minimum, asks the
user whether to continue anyway.  A size that cannot be read counts as
the minimum (fail-open).  Declining is a user decision, not an error.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass

import click

from preflight.core.models.project import TerminalSettings

logger = logging.getLogger(__name__)

SizeProbe = Callable[[TerminalSettings], tuple[int, int]]
Confirm = Callable[[str], str]

_AFFIRMATIVE = frozenset({"y", "Y"})


@dataclass
class TerminalCheck:
    """Terminal size and, when undersized, the user's answer."""

    columns: int
    lines: int
    undersized: bool = False
    answer: str | None = None      # None = not asked

    @property
    def proceed(self) -> bool:
        return not self.undersized or self.answer in _AFFIRMATIVE

    def to_dict(self) -> dict:
        return {
            "columns": self.columns,
            "lines": self.lines,
            "undersized": self.undersized,
            "proceed": self.proceed,
        }


def terminal_size(settings: TerminalSettings) -> tuple[int, int]:
    """Current ``(columns, lines)``; the minimum when it cannot be read."""
    size = shutil.get_terminal_size(fallback=(settings.min_columns, settings.min_lines))
    return size.columns, size.lines


def ask_single_char(prompt: str) -> str:
    """Show ``prompt`` and read one keypress (no Enter needed)."""
    click.echo(prompt, nl=False)
    try:
        answer = click.getchar()
    except (EOFError, OSError) as e:
        logger.debug("Could not read an answer: %s", e)
        answer = ""
    click.echo()
    return answer


def check_terminal(
    settings: TerminalSettings,
    *,
    size_probe: SizeProbe | None = None,
    confirm: Confirm | None = None,
    interactive: bool = True,
) -> TerminalCheck:
    """Check the terminal size and prompt if it is too small.

    Args:
        settings: Minimum size.
        size_probe: Returns ``(columns, lines)``; defaults to the real terminal.
        confirm: Shows a prompt and returns the answer; defaults to a
            single keypress on the terminal.
        interactive: When False an undersized terminal is reported
            but no question is asked.
    """
    logger.info("Checking terminal size...")
    columns, lines = (size_probe or terminal_size)(settings)
    check = TerminalCheck(columns=columns, lines=lines)

    if columns >= settings.min_columns and lines >= settings.min_lines:
        return check

    check.undersized = True
    logger.warning("Terminal too small: %dx%d", columns, lines)
    logger.warning(
        "Recommended minimum size: %dx%d, the interface may not render correctly",
        settings.min_columns, settings.min_lines,
    )
    if not interactive:
        return check

    check.answer = (confirm or ask_single_char)("Continue anyway? (y/N) ")
    return check
