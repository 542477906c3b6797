"""
Configuration loader — reads preflight.yml into the LaunchProject model.

The file is optional: a project without one is treated as a plain
Cargo project.  When present it is parsed as YAML, validated against
the Pydantic schema, and completed with the binary name taken from
the build manifest.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

import yaml

from preflight.core.models.project import LaunchProject

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "preflight.yml"


class ConfigError(Exception):
    """Raised when the launch configuration is invalid."""

    exit_code = 1


def find_config_file(project_root: Path) -> Path | None:
    """Return ``preflight.yml`` under the project root, if it exists."""
    candidate = project_root / CONFIG_FILE
    return candidate if candidate.is_file() else None


def load_config(project_root: Path, path: Path | None = None) -> LaunchProject:
    """Load and validate the launch configuration.

    Args:
        project_root: Directory holding the manifest and sources.
        path: Explicit config file.  If None, ``preflight.yml`` under
            the project root is used when it exists.

    Returns:
        Validated LaunchProject with ``binary`` resolved.

    Raises:
        ConfigError: If an explicit file is missing or any file is invalid.
    """
    if path is None:
        path = find_config_file(project_root)
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    if path is None:
        logger.debug("No %s in %s, using defaults", CONFIG_FILE, project_root)
        project = LaunchProject()
    else:
        project = _parse_config(path)

    if not project.binary:
        project = project.model_copy(
            update={"binary": resolve_binary_name(project_root, project.manifest)},
        )
    return project


def _parse_config(path: Path) -> LaunchProject:
    logger.debug("Loading launch config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        return LaunchProject.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid launch configuration: {e}") from e


def resolve_binary_name(project_root: Path, manifest: str) -> str:
    """Binary name from the manifest's ``[package].name``.

    Falls back to the project directory name when the manifest is
    absent, not TOML, or has no package name.
    """
    manifest_path = project_root / manifest
    try:
        with manifest_path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return project_root.resolve().name

    name = data.get("package", {}).get("name")
    if isinstance(name, str) and name:
        return name
    return project_root.resolve().name
