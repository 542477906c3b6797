"""
L0 Data — Host identity → package-manager recipe.

One recipe per distribution family.  Identities absent from
``PROVISIONING_RECIPES`` are unknown hosts: provisioning is skipped
with a warning.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PackageManager:
    """How to refresh the package index and install packages."""

    binary: str
    install: tuple[str, ...]
    update: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProvisioningRecipe:
    """Everything needed to install the build prerequisites on a family.

    ``managers`` is ordered: the first one whose binary is on the
    search path is used.  ``unprivileged_ok`` allows running without
    sudo (minimal distributions often run as root without sudo).
    """

    family: str
    managers: tuple[PackageManager, ...]
    packages: tuple[str, ...]
    unprivileged_ok: bool = False


_APT = PackageManager(
    binary="apt-get",
    update=("apt-get", "update", "-qq"),
    install=("apt-get", "install", "-y"),
)
_DNF = PackageManager(binary="dnf", install=("dnf", "install", "-y"))
_YUM = PackageManager(binary="yum", install=("yum", "install", "-y"))
_PACMAN = PackageManager(binary="pacman", install=("pacman", "-Sy", "--noconfirm"))
_ZYPPER = PackageManager(binary="zypper", install=("zypper", "install", "-y"))
_APK = PackageManager(binary="apk", install=("apk", "add", "--no-cache"))

DEBIAN = ProvisioningRecipe(
    family="debian",
    managers=(_APT,),
    packages=("build-essential", "curl"),
)
RHEL = ProvisioningRecipe(
    family="rhel",
    managers=(_DNF, _YUM),
    packages=("gcc", "make", "curl"),
)
ARCH = ProvisioningRecipe(
    family="arch",
    managers=(_PACMAN,),
    packages=("base-devel", "curl"),
)
SUSE = ProvisioningRecipe(
    family="suse",
    managers=(_ZYPPER,),
    packages=("gcc", "make", "curl"),
)
ALPINE = ProvisioningRecipe(
    family="alpine",
    managers=(_APK,),
    packages=("build-base", "curl"),
    unprivileged_ok=True,
)

PROVISIONING_RECIPES: dict[str, ProvisioningRecipe] = {
    "debian": DEBIAN,
    "ubuntu": DEBIAN,
    "linuxmint": DEBIAN,
    "kali": DEBIAN,
    "fedora": RHEL,
    "rhel": RHEL,
    "centos": RHEL,
    "rocky": RHEL,
    "almalinux": RHEL,
    "arch": ARCH,
    "manjaro": ARCH,
    "endeavouros": ARCH,
    "opensuse": SUSE,
    "opensuse-leap": SUSE,
    "opensuse-tumbleweed": SUSE,
    "sles": SUSE,
    "alpine": ALPINE,
}


def recipe_for(identity: str) -> ProvisioningRecipe | None:
    """Look up the recipe for a host identity (None = unknown host)."""
    return PROVISIONING_RECIPES.get(identity)
