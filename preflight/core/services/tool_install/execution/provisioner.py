"""
L4 Execution — Build-dependency provisioning.

Installs the compiler, build driver and network fetcher through the
host's package manager.  Nothing here is fatal: an unknown host, a
missing sudo, or a failing package manager is reported as a warning
and the pipeline carries on.  The build stage surfaces the real
consequence if a tool was actually needed.
"""

from __future__ import annotations

import logging
import os
import shlex
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from preflight.adapters.base import CommandRunner
from preflight.core.models.action import Receipt
from preflight.core.models.host import CapabilitySet, HostProfile
from preflight.core.services.tool_install.data.constants import SUDO
from preflight.core.services.tool_install.data.package_managers import (
    PackageManager,
    ProvisioningRecipe,
    recipe_for,
)
from preflight.core.services.tool_install.detection.capabilities import (
    is_available,
    probe_capabilities,
)

logger = logging.getLogger(__name__)


@dataclass
class ProvisioningPlan:
    """What provisioning would do on this host, without doing it.

    ``action``:
        - ``none``  — every capability is already present
        - ``skip``  — host unrecognised, nothing to run
        - ``block`` — recognised, but cannot run (no manager / no privilege)
        - ``run``   — ``commands`` are ready to execute in order
    """

    action: Literal["none", "skip", "block", "run"]
    commands: list[list[str]] = field(default_factory=list)
    reason: str = ""
    recipe: ProvisioningRecipe | None = None


@dataclass
class ProvisioningOutcome:
    """Result of the provisioning stage."""

    status: Literal["ok", "skipped", "failed"]
    message: str
    capabilities: CapabilitySet
    receipts: list[Receipt] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "message": self.message,
            "missing": self.capabilities.missing,
            "commands": [r.command for r in self.receipts],
        }


def _running_as_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def _select_manager(
    recipe: ProvisioningRecipe,
    search_path: str | None,
) -> PackageManager | None:
    for manager in recipe.managers:
        if is_available(manager.binary, search_path):
            return manager
    return None


def _privilege_prefix(
    recipe: ProvisioningRecipe,
    search_path: str | None,
    is_root: bool,
) -> list[str] | None:
    """Command prefix granting root, or None when root is unreachable."""
    if is_root:
        return []
    if is_available(SUDO, search_path):
        return [SUDO]
    if recipe.unprivileged_ok:
        return []
    return None


def plan_provisioning(
    host: HostProfile,
    capabilities: CapabilitySet,
    *,
    search_path: str | None = None,
    is_root: bool | None = None,
) -> ProvisioningPlan:
    """Decide which package-manager commands provisioning needs.

    Pure decision: reads the search path, runs nothing.
    """
    if capabilities.satisfied:
        return ProvisioningPlan(action="none", reason="all build dependencies present")

    recipe = recipe_for(host.identity)
    wanted = ", ".join(capabilities.missing)
    if recipe is None:
        return ProvisioningPlan(
            action="skip",
            reason=(
                f"Unrecognised distribution: {host.identity}; "
                f"install manually: {wanted}"
            ),
        )

    manager = _select_manager(recipe, search_path)
    if manager is None:
        binaries = "/".join(m.binary for m in recipe.managers)
        return ProvisioningPlan(
            action="block",
            recipe=recipe,
            reason=f"No package manager found for {recipe.family} ({binaries})",
        )

    if is_root is None:
        is_root = _running_as_root()
    prefix = _privilege_prefix(recipe, search_path, is_root)
    install = [*manager.install, *recipe.packages]
    if prefix is None:
        return ProvisioningPlan(
            action="block",
            recipe=recipe,
            reason=f"sudo not available, install manually: {shlex.join(install)}",
        )

    commands: list[list[str]] = []
    if manager.update:
        commands.append([*prefix, *manager.update])
    commands.append([*prefix, *install])
    return ProvisioningPlan(action="run", commands=commands, recipe=recipe)


def provision_dependencies(
    host: HostProfile,
    capabilities: CapabilitySet,
    runner: CommandRunner,
    *,
    required_tools: Sequence[str],
    search_path: str | None = None,
    is_root: bool | None = None,
    timeout: int | None = None,
) -> ProvisioningOutcome:
    """Install missing build dependencies with the host's package manager.

    Idempotent: when ``capabilities`` is already satisfied no command
    runs.  Commands run in order and stop at the first failure; nothing
    is retried.  Capabilities are probed again afterwards.

    Returns:
        ProvisioningOutcome with the re-derived CapabilitySet.
    """
    plan = plan_provisioning(
        host, capabilities, search_path=search_path, is_root=is_root,
    )

    if plan.action == "none":
        logger.info("Build dependencies already installed")
        return ProvisioningOutcome(status="ok", message=plan.reason, capabilities=capabilities)

    if plan.action in ("skip", "block"):
        logger.warning(plan.reason)
        return ProvisioningOutcome(
            status="skipped" if plan.action == "skip" else "failed",
            message=plan.reason,
            capabilities=capabilities,
        )

    assert plan.recipe is not None
    logger.info(
        "Installing build dependencies: %s", ", ".join(plan.recipe.packages),
    )

    receipts: list[Receipt] = []
    for command in plan.commands:
        receipt = runner.run(command, search_path=search_path, timeout=timeout)
        receipts.append(receipt)
        if receipt.failed:
            logger.warning(
                "Automatic installation failed (%s): %s",
                shlex.join(command), receipt.error,
            )
            return ProvisioningOutcome(
                status="failed",
                message=f"{shlex.join(command)} failed: {receipt.error}",
                capabilities=probe_capabilities(required_tools, search_path),
                receipts=receipts,
            )

    after = probe_capabilities(required_tools, search_path)
    if not after.satisfied:
        message = f"Still missing after installation: {', '.join(after.missing)}"
        logger.warning(message)
        return ProvisioningOutcome(
            status="failed", message=message, capabilities=after, receipts=receipts,
        )

    logger.info("Build dependencies installed")
    return ProvisioningOutcome(
        status="ok",
        message="build dependencies installed",
        capabilities=after,
        receipts=receipts,
    )
