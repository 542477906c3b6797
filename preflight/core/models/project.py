"""
Project model — how the launched application is built.

Loaded from an optional ``preflight.yml`` at the project root.  Every
field has a default matching a plain Cargo project, so a repository
without the file still works.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from preflight.core.models.build import BuildMode


class ToolchainSettings(BaseModel):
    """The language toolchain that compiles the application."""

    driver: str = "cargo"
    env_file: str = "~/.cargo/env"
    installer_url: str = "https://sh.rustup.rs"
    installer_args: list[str] = Field(default_factory=lambda: ["-y"])
    build_args: list[str] = Field(default_factory=lambda: ["build"])
    release_flag: str = "--release"
    manual_url: str = "https://rustup.rs/"


class TerminalSettings(BaseModel):
    """Minimum terminal size the application renders correctly in."""

    min_columns: int = Field(default=80, ge=1)
    min_lines: int = Field(default=24, ge=1)


class LaunchProject(BaseModel):
    """Root launch configuration.

    ``binary`` is filled in by the loader when left unset: the
    ``[package].name`` of the manifest, else the project directory name.
    """

    name: str = ""
    binary: str | None = None

    manifest: str = "Cargo.toml"
    lock_file: str | None = "Cargo.lock"
    source_dir: str = "src"
    source_suffixes: list[str] = Field(default_factory=lambda: [".rs"])
    target_dir: str = "target"

    required_tools: list[str] = Field(default_factory=lambda: ["gcc", "make", "curl"])
    fetcher: str = "curl"
    command_timeout: int | None = Field(default=None, ge=1)

    toolchain: ToolchainSettings = Field(default_factory=ToolchainSettings)
    terminal: TerminalSettings = Field(default_factory=TerminalSettings)

    @property
    def display_name(self) -> str:
        return self.name or self.binary or "application"

    def manifest_path(self, root: Path) -> Path:
        return root / self.manifest

    def lock_path(self, root: Path) -> Path | None:
        return root / self.lock_file if self.lock_file else None

    def source_root(self, root: Path) -> Path:
        return root / self.source_dir

    def artifact_path(self, root: Path, mode: BuildMode) -> Path:
        """Per-mode output path, e.g. ``target/release/rmdb``."""
        return root / self.target_dir / mode.value / (self.binary or root.name)

    def manual_build_hint(self, mode: BuildMode) -> str:
        """The command a user can run by hand to build ``mode``."""
        parts = [self.toolchain.driver, *self.toolchain.build_args]
        if mode is BuildMode.RELEASE and self.toolchain.release_flag:
            parts.append(self.toolchain.release_flag)
        return " ".join(parts)
