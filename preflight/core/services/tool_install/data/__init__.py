"""
L0 Data — pure data tables for host provisioning.

No logic beyond lookups, no I/O.
"""

from preflight.core.services.tool_install.data.constants import (  # noqa: F401
    ARCH_RELEASE_FILE,
    DEBIAN_VERSION_FILE,
    FETCH_FLAGS,
    INSTALLER_SHELL,
    OS_RELEASE_FILE,
    REDHAT_RELEASE_FILE,
    SUDO,
)
from preflight.core.services.tool_install.data.package_managers import (  # noqa: F401
    PROVISIONING_RECIPES,
    PackageManager,
    ProvisioningRecipe,
    recipe_for,
)
