"""
Rebuild decision — is the compiled artifact still current?

An artifact is stale when it is missing, when the manifest, lock file,
any source file or the source root is strictly newer than it, or when
a rebuild is forced.  The filesystem is scanned on every call; nothing
is remembered between runs.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from preflight.core.models.build import (
    Artifact,
    BuildManifest,
    BuildMode,
    RunRequest,
    SourceTree,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RebuildDecision:
    """Whether to rebuild, and the first reason found."""

    required: bool
    reason: str
    forced: bool = False

    def __bool__(self) -> bool:
        return self.required


def _mtime_ns(path: Path) -> int | None:
    try:
        return path.stat().st_mtime_ns
    except (FileNotFoundError, NotADirectoryError):
        return None


# ── Snapshots ───────────────────────────────────────────────────


def scan_manifest(manifest: Path, lock: Path | None = None) -> BuildManifest:
    """Timestamps of the manifest and its optional lock file."""
    return BuildManifest(
        path=manifest,
        mtime_ns=_mtime_ns(manifest),
        lock_path=lock,
        lock_mtime_ns=_mtime_ns(lock) if lock is not None else None,
    )


def scan_sources(root: Path, suffixes: Sequence[str] = ()) -> SourceTree:
    """Timestamps of every source file under ``root``.

    Args:
        root: Source directory.  A missing directory is an empty tree.
        suffixes: File suffixes to include (``[".rs"]``); empty = all files.
    """
    tree = SourceTree(root=root, root_mtime_ns=_mtime_ns(root))
    if tree.root_mtime_ns is None:
        return tree

    wanted = tuple(suffixes)
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            if wanted and not filename.endswith(wanted):
                continue
            path = Path(dirpath) / filename
            mtime = _mtime_ns(path)
            if mtime is not None:
                tree.files[path] = mtime
    return tree


def inspect_artifact(path: Path, mode: BuildMode = BuildMode.DEBUG) -> Artifact:
    """Current state of the artifact at ``path``."""
    mtime = _mtime_ns(path)
    return Artifact(
        path=path,
        mode=mode,
        mtime_ns=mtime if mtime is not None and path.is_file() else None,
        executable=path.is_file() and os.access(path, os.X_OK),
    )


def newest_input_ns(manifest: BuildManifest, sources: SourceTree) -> int | None:
    """Latest timestamp across every build input."""
    stamps = [
        manifest.mtime_ns,
        manifest.lock_mtime_ns,
        sources.root_mtime_ns,
        *sources.files.values(),
    ]
    present = [s for s in stamps if s is not None]
    return max(present) if present else None


# ── Decision ────────────────────────────────────────────────────


def decide_rebuild(
    request: RunRequest,
    manifest: BuildManifest,
    sources: SourceTree,
    artifact: Artifact,
) -> RebuildDecision:
    """Apply the staleness rule to the current filesystem snapshot.

    A missing manifest or artifact means "rebuild", never an error.
    """
    if request.force_rebuild:
        return RebuildDecision(True, "forced rebuild", forced=True)

    if not artifact.exists:
        return RebuildDecision(True, f"{artifact.path} does not exist")
    built_at = artifact.mtime_ns
    assert built_at is not None

    if not manifest.exists:
        return RebuildDecision(True, f"{manifest.path} does not exist")
    assert manifest.mtime_ns is not None
    if manifest.mtime_ns > built_at:
        return RebuildDecision(True, f"{manifest.path.name} changed")

    if manifest.lock_mtime_ns is not None and manifest.lock_mtime_ns > built_at:
        assert manifest.lock_path is not None
        return RebuildDecision(True, f"{manifest.lock_path.name} changed")

    for path, mtime in sources.files.items():
        if mtime > built_at:
            return RebuildDecision(True, f"{path} changed")

    if sources.root_mtime_ns is not None and sources.root_mtime_ns > built_at:
        return RebuildDecision(True, f"files added or removed in {sources.root}")

    return RebuildDecision(False, "artifact up to date")
