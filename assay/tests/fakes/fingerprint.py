"""Fake FingerprintPort implementation for testing."""

from collections.abc import Iterable
from types import MappingProxyType

from assay.core.models import FingerprintMode, Snapshot
from assay.core.ports import FingerprintPort


class FakeFingerprintPort(FingerprintPort):
    """Returns a scripted sequence of snapshots.

    Each call to ``snapshot`` returns the next scripted snapshot. Once
    the script is exhausted the last snapshot is repeated.
    """

    def __init__(self, snapshots: Iterable[dict[str, str | float]] = ()):
        """Initialize with the snapshots to return, in order."""
        self.snapshots: list[dict[str, str | float]] = list(snapshots)
        self.snapshot_call_count = 0
        self.last_paths: tuple[str, ...] = ()
        self.last_pattern: str | None = None
        self.last_mode: FingerprintMode | None = None
        self.should_fail: bool = False
        self.fail_error: Exception = PermissionError("Permission denied")

    def snapshot(
        self,
        paths: Iterable[str],
        pattern: str | None = None,
        mode: FingerprintMode = FingerprintMode.HASH,
    ) -> Snapshot:
        """Return the next scripted snapshot."""
        self.snapshot_call_count += 1
        self.last_paths = tuple(paths)
        self.last_pattern = pattern
        self.last_mode = mode

        if self.should_fail:
            raise self.fail_error

        if not self.snapshots:
            return MappingProxyType({})
        index = min(self.snapshot_call_count, len(self.snapshots)) - 1
        return MappingProxyType(dict(self.snapshots[index]))

    def add_snapshot(self, snapshot: dict[str, str | float]) -> None:
        """Append a snapshot to the script."""
        self.snapshots.append(snapshot)

    def reset(self) -> None:
        """Reset the script and all call tracking."""
        self.snapshots.clear()
        self.snapshot_call_count = 0
        self.last_paths = ()
        self.last_pattern = None
        self.last_mode = None
        self.should_fail = False
