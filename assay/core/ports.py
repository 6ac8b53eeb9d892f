"""Port interfaces for the assay test engine.

These abstract base classes define the boundaries between core
domain logic and its collaborators. Concrete output reporters live
in the adapters/ package; the composites and the filesystem
fingerprinter live in the core.

Port Interface Categories:

1. **Driven Ports** (core calls out to implementations)
   - ReporterPort: React to lifecycle and result events
   - FingerprintPort: Snapshot the files under a set of paths

2. **Callbacks** (supplied by the caller of the watch loop)
   - WatchCallback: Decide whether to keep watching after a change
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

from .models import ExpectationResult, FingerprintMode, Snapshot

# (added, deleted, modified) -> keep watching?
WatchCallback = Callable[[frozenset[str], frozenset[str], frozenset[str]], bool]


# ============================================================================
# DRIVEN PORTS (Core calls out to implementations)
# ============================================================================


class ReporterPort(ABC):
    """Port for reacting to test lifecycle and result events.

    Every reporter implements these seven calls. The lifecycle
    controller invokes them in this order for a run:

        start_reporter
          (start_context
             (start_test add_result* end_test)*
           end_context)*
        end_reporter

    Implementations must handle:
    - Being driven by a fan-out composite alongside other reporters
    - Results arriving outside any test (top-level expectations)
    """

    @abstractmethod
    def start_reporter(self) -> None:
        """Begin a run. Resets the "any failed" flag."""

    @abstractmethod
    def start_context(self, description: str) -> None:
        """Open a grouping of checks.

        Args:
            description: Human-readable description of the grouping.
        """

    @abstractmethod
    def start_test(self, description: str) -> None:
        """Begin a single check.

        Args:
            description: Description of the check, already composed with
                its grouping description where applicable.
        """

    @abstractmethod
    def add_result(self, result: ExpectationResult) -> None:
        """Receive one finished expectation result.

        Args:
            result: The immutable result record.
        """

    @abstractmethod
    def end_test(self) -> None:
        """Finish the current check. Clears the current-test marker."""

    @abstractmethod
    def end_context(self) -> None:
        """Close the current grouping."""

    @abstractmethod
    def end_reporter(self) -> None:
        """Finish the run."""


class FingerprintPort(ABC):
    """Port for snapshotting the files under one or more directories.

    Implementations must handle:
    - Files vanishing between listing and fingerprinting (omit them)
    - Non-regular entries such as directories (omit them)
    - Propagating any other I/O failure unchanged
    """

    @abstractmethod
    def snapshot(
        self,
        paths: Iterable[str],
        pattern: str | None = None,
        mode: FingerprintMode = FingerprintMode.HASH,
    ) -> Snapshot:
        """Fingerprint every matching file that currently exists.

        Args:
            paths: Directories to list.
            pattern: Optional regular expression searched against each
                file name. If None, every file matches.
            mode: Content hash or modification time.

        Returns:
            Read-only mapping of absolute file path to fingerprint.

        Raises:
            FileNotFoundError: If one of the directories does not exist.
            OSError: For any I/O failure other than a vanished or
                non-regular file.
        """
