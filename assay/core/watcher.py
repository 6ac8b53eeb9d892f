"""Watch loop for continuous re-testing.

This module implements the polling loop that repeatedly snapshots a
set of directories, diffs each snapshot against the previous one and
hands any changes to a caller-supplied callback.
"""

import asyncio
import logging
from collections.abc import Iterable

from .differ import compare_state
from .models import FingerprintMode, WatchStats
from .ports import FingerprintPort, WatchCallback

logger = logging.getLogger(__name__)


class DirectoryWatcher:
    """Polls directories for additions, deletions and modifications.

    Polling is coarse (seconds, not milliseconds): the loop trades
    latency for low overhead and portability.
    """

    def __init__(
        self,
        fingerprinter: FingerprintPort,
        poll_interval_seconds: float = 1.0,
    ):
        """Initialize the watcher.

        Args:
            fingerprinter: FingerprintPort used to snapshot the paths.
            poll_interval_seconds: Delay between two polls.

        Raises:
            ValueError: If the interval is negative.
        """
        if poll_interval_seconds < 0:
            raise ValueError("poll_interval_seconds must be non-negative")
        self.fingerprinter = fingerprinter
        self.poll_interval_seconds = poll_interval_seconds

    async def watch(
        self,
        paths: Iterable[str],
        callback: WatchCallback,
        pattern: str | None = None,
        mode: FingerprintMode = FingerprintMode.HASH,
    ) -> WatchStats:
        """Watch ``paths`` until the callback asks to stop.

        The callback is invoked with ``(added, deleted, modified)`` each
        time a poll detects at least one change. Returning anything other
        than ``True`` ends the loop. An exception raised by the callback
        is logged and treated as "keep going".

        Cancellation (task cancel, KeyboardInterrupt) propagates.

        Args:
            paths: Directories to watch.
            callback: Change handler returning the continuation signal.
            pattern: Optional file name regular expression.
            mode: Fingerprint mode.

        Returns:
            WatchStats for the finished session.
        """
        paths = tuple(paths)
        prev = self.fingerprinter.snapshot(paths, pattern, mode)
        logger.info(
            f"Watching {len(prev)} files under {', '.join(paths)} "
            f"every {self.poll_interval_seconds}s"
        )

        polls = 0
        callbacks = 0
        callback_failures = 0

        while True:
            await asyncio.sleep(self.poll_interval_seconds)
            polls += 1

            curr = self.fingerprinter.snapshot(paths, pattern, mode)
            changes = compare_state(prev, curr)

            if changes.count > 0:
                logger.debug(
                    f"Poll #{polls}: {len(changes.added)} added, "
                    f"{len(changes.deleted)} deleted, "
                    f"{len(changes.modified)} modified"
                )
                callbacks += 1
                keep_going = True
                try:
                    keep_going = callback(
                        changes.added, changes.deleted, changes.modified
                    )
                except Exception as e:
                    callback_failures += 1
                    logger.error(f"Watch callback failed: {e}", exc_info=True)

                if keep_going is not True:
                    logger.info(f"Watch stopped by callback after {polls} polls")
                    return WatchStats(
                        polls=polls,
                        callbacks=callbacks,
                        callback_failures=callback_failures,
                        paths=paths,
                    )

            prev = curr
