"""
L4 Execution — ``__init__.py`` re-exports the stages that change the host.

Everything here may install software; all commands go through a
CommandRunner.
"""

from preflight.core.services.tool_install.execution.env_file import (  # noqa: F401
    apply_env_file,
    expand_home,
    merge_search_path,
    read_path_entries,
)
from preflight.core.services.tool_install.execution.provisioner import (  # noqa: F401
    ProvisioningOutcome,
    ProvisioningPlan,
    plan_provisioning,
    provision_dependencies,
)
from preflight.core.services.tool_install.execution.toolchain import (  # noqa: F401
    ToolchainStatus,
    ensure_toolchain,
    installer_commands,
    resolve_toolchain,
)
