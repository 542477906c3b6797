"""
Process replacement — hand the terminal over to the launched program.

On POSIX the launcher's own process image is replaced, so the program
inherits the controlling terminal, signal dispositions and exit status
directly.  Elsewhere the program runs as a child and its exit status
becomes ours.
"""

from __future__ import annotations

import os
import signal
import subprocess
import sys
from collections.abc import Mapping, Sequence
from typing import NoReturn


def replace_process(argv: Sequence[str], env: Mapping[str, str]) -> NoReturn:
    """Replace the current process with ``argv``.

    Raises:
        OSError: If the program cannot be executed.
    """
    sys.stdout.flush()
    sys.stderr.flush()

    if os.name == "posix":
        os.execve(argv[0], list(argv), dict(env))

    # No exec: wait for the child, leave Ctrl+C to it
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        completed = subprocess.run(list(argv), env=dict(env))
    finally:
        signal.signal(signal.SIGINT, previous)
    raise SystemExit(completed.returncode)
