"""Core domain logic for the assay test engine.

This package contains zero external dependencies and represents
the pure engine: expectations, the lifecycle controller, the reporter
composites, the suite loader and the watch loop. Concrete output
reporters and the auto-test scheduler live in the adapters package.
"""

from .models import (
    ChangeSet,
    ExpectationResult,
    FingerprintMode,
    Outcome,
    ReporterState,
    RunResults,
    Snapshot,
    WatchStats,
)

__all__ = [
    "ChangeSet",
    "ExpectationResult",
    "FingerprintMode",
    "Outcome",
    "ReporterState",
    "RunResults",
    "Snapshot",
    "WatchStats",
]
