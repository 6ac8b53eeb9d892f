"""Domain models for the assay test engine.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeAlias


class Outcome(Enum):
    """Terminal outcome of a single expectation.

    PENDING is a category of its own: neither a success nor a failure,
    so a suite with pending checks is never reported as fully green.
    """

    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"
    ERROR = "error"


@dataclass(frozen=True)
class ExpectationResult:
    """The canonical outcome record produced by every check.

    Decoration (labels, info, file stamps) never mutates a record;
    it returns a new copy via ``dataclasses.replace``.
    """

    outcome: Outcome
    failure_message: str
    success_message: str
    call_label: str = ""
    info: str | None = None
    file: str | None = None  # stamped by ListReporter
    test: str | None = None  # stamped by LifecycleController

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def failed(self) -> bool:
        """True for failures and errors. Pending does not count."""
        return self.outcome in {Outcome.FAILURE, Outcome.ERROR}

    @property
    def message(self) -> str:
        """The message that describes this outcome."""
        if self.outcome is Outcome.SUCCESS:
            return self.success_message
        return self.failure_message

    def stamped(self, **changes: Any) -> "ExpectationResult":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


# Absolute path -> content digest (hash mode) or modification time (mtime mode)
Snapshot: TypeAlias = Mapping[str, str | float]


class FingerprintMode(Enum):
    """How a file's fingerprint is computed.

    HASH is accurate but reads every file. MTIME is cheap, but two
    writes within the timestamp granularity look identical.
    """

    HASH = "hash"
    MTIME = "mtime"


@dataclass(frozen=True)
class ChangeSet:
    """Difference between two fingerprint snapshots."""

    added: frozenset[str] = frozenset()
    deleted: frozenset[str] = frozenset()
    modified: frozenset[str] = frozenset()

    @property
    def count(self) -> int:
        return len(self.added) + len(self.deleted) + len(self.modified)


@dataclass
class ReporterState:
    """Mutable lifecycle bookkeeping owned by a single reporter.

    Only the most recent context description is tracked; nested
    groupings are not stacked here.

    Note: ``any_failed`` is monotonic within a run. It is only reset
    by ``start_reporter()``.
    """

    context: str = ""
    test: str = ""
    any_failed: bool = False
    context_open: bool = False
    current_file: str | None = None


@dataclass(frozen=True)
class RunResults:
    """Ordered results of a suite run, stamped with their originating file."""

    results: tuple[ExpectationResult, ...] = ()

    def __iter__(self):
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.outcome is Outcome.SUCCESS)

    @property
    def failures(self) -> int:
        return sum(1 for r in self.results if r.outcome is Outcome.FAILURE)

    @property
    def errors(self) -> int:
        return sum(1 for r in self.results if r.outcome is Outcome.ERROR)

    @property
    def pending(self) -> int:
        return sum(1 for r in self.results if r.outcome is Outcome.PENDING)

    @property
    def any_failed(self) -> bool:
        return any(r.failed for r in self.results)

    def by_file(self) -> Mapping[str, tuple[ExpectationResult, ...]]:
        """Group results per file, keeping file order of first appearance."""
        grouped: dict[str, list[ExpectationResult]] = {}
        for result in self.results:
            grouped.setdefault(result.file or "", []).append(result)
        return MappingProxyType({k: tuple(v) for k, v in grouped.items()})

    def extended(self, other: "RunResults") -> "RunResults":
        """Return a new RunResults with ``other`` appended."""
        return RunResults(results=self.results + other.results)


@dataclass(frozen=True)
class WatchStats:
    """Summary of a finished watch session."""

    polls: int
    callbacks: int
    callback_failures: int = 0
    paths: tuple[str, ...] = field(default_factory=tuple)
