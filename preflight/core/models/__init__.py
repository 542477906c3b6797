"""
Domain models for the launch pipeline.

All models are re-exported here for convenient access:

    from preflight.core.models import BuildMode, HostProfile, LaunchProject, Receipt
"""

from preflight.core.models.action import Receipt
from preflight.core.models.build import (
    Artifact,
    BuildManifest,
    BuildMode,
    RunRequest,
    SourceTree,
)
from preflight.core.models.host import UNKNOWN_HOST, CapabilitySet, HostProfile
from preflight.core.models.project import (
    LaunchProject,
    TerminalSettings,
    ToolchainSettings,
)

__all__ = [
    # build.py
    "Artifact",
    "BuildManifest",
    "BuildMode",
    # host.py
    "CapabilitySet",
    "HostProfile",
    # project.py
    "LaunchProject",
    # action.py
    "Receipt",
    "RunRequest",
    "SourceTree",
    "TerminalSettings",
    "ToolchainSettings",
    "UNKNOWN_HOST",
]
