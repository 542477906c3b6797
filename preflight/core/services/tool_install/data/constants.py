"""
L0 Data — Module-level constants.

Pure data. No logic. No imports beyond stdlib.
"""

from __future__ import annotations

# Host identity descriptor files, consulted read-only in this order.
OS_RELEASE_FILE = "etc/os-release"
DEBIAN_VERSION_FILE = "etc/debian_version"
REDHAT_RELEASE_FILE = "etc/redhat-release"
ARCH_RELEASE_FILE = "etc/arch-release"

# Privilege escalation binary.
SUDO = "sudo"

# Interpreter the downloaded bootstrap installer is piped into.
INSTALLER_SHELL = "sh"

# Transport restrictions for the installer download (HTTPS, TLS >= 1.2).
FETCH_FLAGS: tuple[str, ...] = ("--proto", "=https", "--tlsv1.2", "-sSf")
