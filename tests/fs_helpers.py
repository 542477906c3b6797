"""
Filesystem helpers shared by the tests.
"""

import os
import stat
from pathlib import Path

# A fixed point in the past; inputs are stamped relative to it so tests
# never depend on filesystem timestamp granularity.
BASE_NS = 1_700_000_000 * 10**9
SECOND_NS = 10**9


def set_mtime(path: Path, ns: int) -> None:
    """Set both atime and mtime of ``path`` to ``ns``."""
    os.utime(path, ns=(ns, ns))


def write_executable(path: Path, body: str = "exit 0\n") -> Path:
    """Create an executable shell stub at ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def artifact_path(root: Path, mode: str = "debug", name: str = "demo") -> Path:
    return root / "target" / mode / name
