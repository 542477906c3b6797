"""
L4 Execution — Language toolchain bootstrap.

Makes sure the build driver (``cargo`` by default) resolves.  If it
does not, the official bootstrap installer is downloaded over HTTPS and
run once.  Unlike dependency provisioning this stage is fatal: without
the driver there is nothing to build with.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from preflight.adapters.base import CommandRunner
from preflight.core.errors import ToolchainError
from preflight.core.models.action import Receipt
from preflight.core.models.project import ToolchainSettings
from preflight.core.services.tool_install.data.constants import (
    FETCH_FLAGS,
    INSTALLER_SHELL,
)
from preflight.core.services.tool_install.execution.env_file import apply_env_file

logger = logging.getLogger(__name__)


@dataclass
class ToolchainStatus:
    """Where the build driver lives and the search path that finds it."""

    driver: str
    search_path: str
    installed: bool = False
    receipts: list[Receipt] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "driver": self.driver,
            "installed": self.installed,
            "search_path": self.search_path,
        }


def resolve_toolchain(
    settings: ToolchainSettings,
    search_path: str,
    home: Path,
) -> tuple[str | None, str]:
    """Merge the environment descriptor and look up the driver.

    Returns:
        ``(driver path or None, merged search path)``.
    """
    merged = apply_env_file(settings.env_file, search_path, home)
    return shutil.which(settings.driver, path=merged), merged


def installer_commands(settings: ToolchainSettings, fetcher: str) -> list[list[str]]:
    """Download-then-run commands for the bootstrap installer.

    The first command writes the installer script to stdout; the second
    reads it from stdin.
    """
    return [
        [fetcher, *FETCH_FLAGS, settings.installer_url],
        [INSTALLER_SHELL, "-s", "--", *settings.installer_args],
    ]


def ensure_toolchain(
    settings: ToolchainSettings,
    runner: CommandRunner,
    *,
    search_path: str,
    home: Path,
    fetcher: str = "curl",
    timeout: int | None = None,
) -> ToolchainStatus:
    """Return the toolchain, installing it first if it is absent.

    At most one install attempt is made.

    Raises:
        ToolchainError: If the driver is still unavailable afterwards.
    """
    driver, path = resolve_toolchain(settings, search_path, home)
    if driver:
        logger.info("%s is already installed (%s)", settings.driver, driver)
        return ToolchainStatus(driver=driver, search_path=path)

    logger.warning("%s is not installed, installing it automatically", settings.driver)

    if shutil.which(fetcher, path=path) is None:
        raise ToolchainError(
            f"{fetcher} is not installed, cannot download the {settings.driver} installer. "
            f"Install {settings.driver} manually from {settings.manual_url}"
        )

    fetch_cmd, install_cmd = installer_commands(settings, fetcher)
    logger.info("Downloading %s", settings.installer_url)
    fetched = runner.run(fetch_cmd, capture=True, search_path=path, timeout=timeout)
    receipts = [fetched]
    if fetched.failed or not fetched.output.strip():
        raise ToolchainError(
            f"Could not download the {settings.driver} installer from "
            f"{settings.installer_url}: {fetched.error or 'empty response'}. "
            f"Install it manually from {settings.manual_url}"
        )

    installed = runner.run(
        install_cmd, input_text=fetched.output, search_path=path, timeout=timeout,
    )
    receipts.append(installed)
    if installed.failed:
        raise ToolchainError(
            f"{settings.driver} installation failed: {installed.error}. "
            f"Install it manually from {settings.manual_url}"
        )

    driver, path = resolve_toolchain(settings, path, home)
    if driver is None:
        raise ToolchainError(
            f"{settings.driver} is still not available after installation "
            f"(no {settings.env_file}?). Install it manually from {settings.manual_url}"
        )

    logger.info("%s installed (%s)", settings.driver, driver)
    return ToolchainStatus(driver=driver, search_path=path, installed=True, receipts=receipts)
