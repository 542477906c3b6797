"""
Build — staleness decision and compilation.
"""

from preflight.core.services.build.invoker import (  # noqa: F401
    BuildOutcome,
    build_command,
    run_build,
    settle_artifact_timestamp,
)
from preflight.core.services.build.staleness import (  # noqa: F401
    RebuildDecision,
    decide_rebuild,
    inspect_artifact,
    newest_input_ns,
    scan_manifest,
    scan_sources,
)
