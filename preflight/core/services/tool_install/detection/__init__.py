"""
L3 Detection — ``__init__.py`` re-exports all detection functions.

These functions READ system state but never WRITE.
"""

from preflight.core.services.tool_install.detection.capabilities import (  # noqa: F401
    is_available,
    probe_capabilities,
)
from preflight.core.services.tool_install.detection.host import (  # noqa: F401
    DEFAULT_PROBES,
    HostProbe,
    identify_host,
    probe_arch_release,
    probe_debian_version,
    probe_os_release,
    probe_redhat_release,
)
