"""
Build models — run request, build inputs, and the compiled artifact.

Timestamps are ``st_mtime_ns`` integers; ``None`` means the file does
not exist.  Snapshots are taken fresh on every run and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path


class BuildMode(StrEnum):
    """Compilation profile; selects the artifact path and build flags."""

    DEBUG = "debug"
    RELEASE = "release"


@dataclass(frozen=True)
class RunRequest:
    """What the user asked for on the command line."""

    mode: BuildMode = BuildMode.DEBUG
    force_rebuild: bool = False


@dataclass
class BuildManifest:
    """The project description consumed by the build driver."""

    path: Path
    mtime_ns: int | None = None
    lock_path: Path | None = None
    lock_mtime_ns: int | None = None

    @property
    def exists(self) -> bool:
        return self.mtime_ns is not None


@dataclass
class SourceTree:
    """Source files under a root, plus the root directory's own mtime.

    The root mtime catches files added or removed directly under the
    root, which individual file mtimes cannot reflect.
    """

    root: Path
    root_mtime_ns: int | None = None
    files: dict[Path, int] = field(default_factory=dict)


@dataclass
class Artifact:
    """The compiled binary for one build mode."""

    path: Path
    mode: BuildMode = BuildMode.DEBUG
    mtime_ns: int | None = None
    executable: bool = False

    @property
    def exists(self) -> bool:
        return self.mtime_ns is not None
