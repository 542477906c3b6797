"""
L3 Detection — Host identity.

Ordered probes over well-known descriptor files.  The first probe that
returns an identity wins; when none does the host is ``unknown``.
Probes read files only and never raise.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from preflight.core.models.host import UNKNOWN_HOST, HostProfile
from preflight.core.services.tool_install.data.constants import (
    ARCH_RELEASE_FILE,
    DEBIAN_VERSION_FILE,
    OS_RELEASE_FILE,
    REDHAT_RELEASE_FILE,
)

logger = logging.getLogger(__name__)

HostProbe = Callable[[Path], str | None]


def probe_os_release(root: Path) -> str | None:
    """``ID=`` from /etc/os-release, e.g. ``ubuntu`` or ``fedora``."""
    try:
        with open(root / OS_RELEASE_FILE, encoding="utf-8") as f:
            for line in f:
                if line.startswith("ID="):
                    value = line.strip().split("=", 1)[1].strip("\"'")
                    return value.lower() or None
    except (FileNotFoundError, OSError, UnicodeDecodeError):
        return None
    return None


def _marker_probe(relative: str, identity: str) -> HostProbe:
    def probe(root: Path) -> str | None:
        try:
            return identity if (root / relative).is_file() else None
        except OSError:
            return None

    probe.__name__ = f"probe_{identity}_marker"
    return probe


probe_debian_version = _marker_probe(DEBIAN_VERSION_FILE, "debian")
probe_redhat_release = _marker_probe(REDHAT_RELEASE_FILE, "rhel")
probe_arch_release = _marker_probe(ARCH_RELEASE_FILE, "arch")

DEFAULT_PROBES: tuple[HostProbe, ...] = (
    probe_os_release,
    probe_debian_version,
    probe_redhat_release,
    probe_arch_release,
)


def identify_host(
    probes: Sequence[HostProbe] = DEFAULT_PROBES,
    root: Path = Path("/"),
) -> HostProfile:
    """Return the identity reported by the first matching probe.

    Args:
        probes: Probe functions in priority order.
        root: Filesystem root the descriptor paths are relative to.

    Returns:
        HostProfile; ``identity == "unknown"`` when nothing matched.
    """
    for probe in probes:
        identity = probe(root)
        if identity:
            name = getattr(probe, "__name__", repr(probe))
            logger.debug("Host identified as %r by %s", identity, name)
            return HostProfile(identity=identity, source=name)
    return HostProfile(identity=UNKNOWN_HOST)
