"""
Shared test fixtures and configuration.
"""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from tests.fs_helpers import BASE_NS, SECOND_NS, artifact_path, set_mtime, write_executable


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() replaces the root handlers; put pytest's back."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """An empty directory used as the whole search path."""
    d = tmp_path / "bin"
    d.mkdir()
    return d


@pytest.fixture
def add_tools(bin_dir: Path) -> Callable[..., str]:
    """Drop executable stubs into ``bin_dir``; returns the search path."""

    def add(*names: str) -> str:
        for name in names:
            write_executable(bin_dir / name)
        return str(bin_dir)

    return add


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    """An empty home directory."""
    d = tmp_path / "home"
    d.mkdir()
    return d


@pytest.fixture
def cargo_project(tmp_path: Path) -> Path:
    """A minimal Cargo project with every input stamped at BASE_NS."""
    root = tmp_path / "demo"
    (root / "src" / "ui").mkdir(parents=True)
    (root / "Cargo.toml").write_text('[package]\nname = "demo"\nversion = "0.1.0"\n')
    (root / "Cargo.lock").write_text("version = 3\n")
    (root / "src" / "main.rs").write_text("fn main() {}\n")
    (root / "src" / "ui" / "mod.rs").write_text("pub fn draw() {}\n")
    (root / "README.md").write_text("demo\n")

    for path in (
        root / "Cargo.toml",
        root / "Cargo.lock",
        root / "src" / "main.rs",
        root / "src" / "ui" / "mod.rs",
        root / "src" / "ui",
        root / "src",
    ):
        set_mtime(path, BASE_NS)
    return root


@pytest.fixture
def built_artifact(cargo_project: Path) -> Path:
    """A debug artifact ten seconds newer than every input."""
    path = write_executable(artifact_path(cargo_project))
    set_mtime(path, BASE_NS + 10 * SECOND_NS)
    return path
