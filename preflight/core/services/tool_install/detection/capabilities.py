"""
L3 Detection — Host capabilities.

Reports which required tools resolve on a search path.  Pure query:
called before provisioning and again afterwards to confirm it worked.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable

from preflight.core.models.host import CapabilitySet


def is_available(tool: str, search_path: str | None = None) -> bool:
    """Whether ``tool`` resolves to an executable on ``search_path``."""
    return shutil.which(tool, path=search_path) is not None


def probe_capabilities(
    tools: Iterable[str],
    search_path: str | None = None,
) -> CapabilitySet:
    """Probe each tool on ``search_path`` (the current PATH when None)."""
    return CapabilitySet({tool: is_available(tool, search_path) for tool in tools})
