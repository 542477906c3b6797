"""
L4 Execution — Toolchain environment descriptor.

Toolchain installers drop a POSIX snippet in the user's home (rustup
writes ``~/.cargo/env``) whose job is to prepend the toolchain's bin
directory to PATH.  Instead of sourcing it into this process, its
``export PATH="<dir>:$PATH"`` lines are read and the directories are
merged into an explicit search-path string that later stages receive.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

# export PATH="$HOME/.cargo/bin:$PATH"   (quotes and ${} braces optional)
_PATH_EXPORT = re.compile(
    r"""^\s*export\s+PATH=(["']?)(?P<entries>.*?):\$\{?PATH\}?\1\s*(?:;.*)?$""",
)


def expand_home(value: str, home: Path) -> str:
    """Expand ``~``, ``$HOME`` and ``${HOME}`` against ``home``."""
    value = value.replace("${HOME}", str(home)).replace("$HOME", str(home))
    if value == "~" or value.startswith("~/"):
        value = str(home) + value[1:]
    return value


def read_path_entries(env_file: Path, home: Path) -> list[str]:
    """Directories the descriptor prepends to PATH, in file order.

    A missing or unreadable descriptor yields no entries.
    """
    try:
        text = env_file.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError, UnicodeDecodeError):
        return []

    entries: list[str] = []
    for line in text.splitlines():
        m = _PATH_EXPORT.match(line)
        if not m:
            continue
        for entry in m.group("entries").split(os.pathsep):
            entry = expand_home(entry, home)
            if entry and entry not in entries:
                entries.append(entry)
    return entries


def merge_search_path(search_path: str, entries: Iterable[str]) -> str:
    """Prepend ``entries`` not already on ``search_path``."""
    current = [p for p in search_path.split(os.pathsep) if p]
    added = [e for e in entries if e not in current]
    return os.pathsep.join([*added, *current])


def apply_env_file(env_file: str, search_path: str, home: Path) -> str:
    """Return ``search_path`` with the descriptor's directories merged in."""
    path = Path(expand_home(env_file, home))
    entries = read_path_entries(path, home)
    if not entries:
        return search_path
    merged = merge_search_path(search_path, entries)
    if merged != search_path:
        logger.debug("Merged %s into search path: %s", path, ", ".join(entries))
    return merged
