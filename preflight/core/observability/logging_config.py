"""
Logging configuration — central setup for the launcher.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Console output is the launcher's progress report: INFO lines carry a
clock tag, warnings and errors a level tag, coloured when stderr is a
terminal.  DEBUG switches to file:line diagnostics.

Level precedence:
    --verbose  >  --quiet / --json  >  PREFLIGHT_LOG_LEVEL  >  INFO
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

import click

LEVEL_ENV = "PREFLIGHT_LOG_LEVEL"
FILE_ENV = "PREFLIGHT_LOG_FILE"
FILE_LEVEL_ENV = "PREFLIGHT_LOG_FILE_LEVEL"

DEFAULT_LEVEL = "INFO"

_DEBUG_FMT = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d  %(message)s"
_FILE_FMT = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# level → (tag, colour); INFO uses the clock instead of a tag
_TAGS: dict[int, tuple[str, str]] = {
    logging.WARNING: ("WARN", "yellow"),
    logging.ERROR: ("ERROR", "red"),
    logging.CRITICAL: ("ERROR", "red"),
}


class ProgressFormatter(logging.Formatter):
    """``[12:03:04] message`` for progress, ``[WARN] message`` for problems."""

    def __init__(self, color: bool = False):
        super().__init__(datefmt="%H:%M:%S")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        tag, fg = _TAGS.get(record.levelno, (self.formatTime(record, self.datefmt), "blue"))
        prefix = f"[{tag}]"
        if self.color:
            prefix = click.style(prefix, fg=fg)
        return f"{prefix} {message}"


def resolve_level(
    *,
    verbose: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> str:
    """Console level name from the CLI flags and the environment."""
    if verbose:
        return "DEBUG"
    if quiet:
        return "WARNING"
    env = os.environ if env is None else env
    return env.get(LEVEL_ENV) or DEFAULT_LEVEL


def setup_logging(
    level: str = DEFAULT_LEVEL,
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure Python logging for the entire process.

    Replaces any handlers already on the root logger, so calling it
    twice does not duplicate output.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path of a log file that always gets full detail.
        log_file_level: Level for the log file; defaults to ``level``.
    """
    console_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    if console_level <= logging.DEBUG:
        console.setFormatter(logging.Formatter(_DEBUG_FMT, datefmt="%H:%M:%S"))
    else:
        console.setFormatter(ProgressFormatter(color=_is_tty(sys.stderr)))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FMT, datefmt=_FILE_DATEFMT))
        root.addHandler(fh)

    root.setLevel(root_level)

    # A broken stderr must not abort the launch
    logging.raiseExceptions = False


def flush_logging() -> None:
    """Flush every root handler; the process image may be replaced next."""
    for handler in logging.getLogger().handlers:
        handler.flush()


def _is_tty(stream) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown names mean INFO."""
    if not level:
        return logging.INFO
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.INFO
