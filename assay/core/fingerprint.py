"""Fingerprinting logic for detecting file changes between polls.

This module provides the core algorithm for converting the files of a
directory into a snapshot of stable fingerprints (content hash or
modification time) that the state differ compares across polls.
"""

import hashlib
import logging
import os
import re
import stat
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import MappingProxyType

from .models import FingerprintMode, Snapshot
from .ports import FingerprintPort

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024

# A file can vanish or be swapped for a directory between listing and
# fingerprinting. Only these are tolerated; every other OSError propagates.
_TOLERATED_ERRORS = (FileNotFoundError, IsADirectoryError, NotADirectoryError)


class DirectoryFingerprinter(FingerprintPort):
    """Produces fingerprint snapshots of the files in a set of directories."""

    def __init__(self, recursive: bool = False):
        """Initialize the fingerprinter.

        Args:
            recursive: If True, descend into subdirectories.
        """
        self.recursive = recursive

    def snapshot(
        self,
        paths: Iterable[str],
        pattern: str | None = None,
        mode: FingerprintMode = FingerprintMode.HASH,
    ) -> Snapshot:
        """Fingerprint every matching regular file under ``paths``."""
        matcher = re.compile(pattern) if pattern else None
        states: dict[str, str | float] = {}

        for root in paths:
            for path in self._list_files(Path(root)):
                if matcher is not None and not matcher.search(path.name):
                    continue
                if mode is FingerprintMode.HASH:
                    value: str | float | None = self.safe_digest(path)
                else:
                    value = self.safe_mtime(path)
                if value is not None:
                    states[str(path)] = value

        logger.debug(f"Snapshot of {len(states)} files ({mode.value})")
        return MappingProxyType(states)

    def _list_files(self, root: Path) -> Iterator[Path]:
        """Yield absolute paths of directory entries under ``root``.

        Raises:
            FileNotFoundError: If ``root`` does not exist.
            NotADirectoryError: If ``root`` is not a directory.
        """
        root = root.resolve()
        if not root.exists():
            raise FileNotFoundError(f"Watched path does not exist: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Watched path is not a directory: {root}")

        entries = root.rglob("*") if self.recursive else root.iterdir()
        yield from sorted(entries)

    @staticmethod
    def safe_digest(path: Path) -> str | None:
        """Compute the sha256 digest of a file's content.

        Returns:
            Hex digest, or None if the file no longer exists or is not a
            regular file.

        Raises:
            OSError: Any other I/O failure (e.g. permission denied).
        """
        try:
            if not stat.S_ISREG(os.stat(path).st_mode):
                return None
            digest = hashlib.sha256()
            with open(path, "rb") as handle:
                for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
                    digest.update(chunk)
        except _TOLERATED_ERRORS:
            logger.debug(f"Skipping vanished or non-regular file: {path}")
            return None
        return digest.hexdigest()

    @staticmethod
    def safe_mtime(path: Path) -> float | None:
        """Return a file's last-modified time.

        Returns:
            ``st_mtime``, or None if the file no longer exists or is not
            a regular file.

        Raises:
            OSError: Any other I/O failure.
        """
        try:
            info = os.stat(path)
        except _TOLERATED_ERRORS:
            logger.debug(f"Skipping vanished file: {path}")
            return None
        if not stat.S_ISREG(info.st_mode):
            return None
        return info.st_mtime
