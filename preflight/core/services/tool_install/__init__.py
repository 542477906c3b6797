"""
Tool install — getting the host ready to build.

Layered like this:
    data/       L0 static tables (package managers, descriptor paths)
    detection/  L3 read-only probes (host identity, capabilities)
    execution/  L4 side effects (package install, toolchain bootstrap)
"""

from preflight.core.services.tool_install.detection import (  # noqa: F401
    identify_host,
    probe_capabilities,
)
from preflight.core.services.tool_install.execution import (  # noqa: F401
    ProvisioningOutcome,
    ToolchainStatus,
    ensure_toolchain,
    provision_dependencies,
)
