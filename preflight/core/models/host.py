"""
Host models — what the running machine is and which tools it has.

Both are derived from read-only probes once per pipeline stage and
never patched.  After provisioning the pipeline probes again and
replaces the old value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

UNKNOWN_HOST = "unknown"


@dataclass(frozen=True)
class HostProfile:
    """Canonical distribution identity of the running host."""

    identity: str = UNKNOWN_HOST
    source: str = ""          # which probe produced the identity

    @property
    def is_known(self) -> bool:
        return self.identity != UNKNOWN_HOST


@dataclass(frozen=True)
class CapabilitySet:
    """Presence flags for the host-level tools the build needs."""

    tools: Mapping[str, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tools", MappingProxyType(dict(self.tools)))

    @property
    def missing(self) -> list[str]:
        """Tool names that could not be resolved, in probe order."""
        return [name for name, present in self.tools.items() if not present]

    @property
    def satisfied(self) -> bool:
        return not self.missing

    def has(self, tool: str) -> bool:
        return self.tools.get(tool, False)

    def to_dict(self) -> dict[str, bool]:
        return dict(self.tools)
