"""
Pipeline errors — the fatal outcomes of a launch.

Only these abort the pipeline.  Non-fatal problems (a package manager
that fails, an unrecognised host) are reported as warnings and carried
on the stage outcome instead.
"""

from __future__ import annotations


class PreflightError(Exception):
    """Base class for fatal pipeline failures."""

    exit_code = 1


class ManifestMissingError(PreflightError):
    """The project has no build manifest."""


class ToolchainError(PreflightError):
    """The language toolchain is missing and could not be installed."""


class BuildError(PreflightError):
    """The compilation step exited with a failure status."""


class LaunchError(PreflightError):
    """The artifact is missing, not executable, or could not be started."""
