"""Markdown file reporter adapter.

Implements the reporter protocol by collecting every result of a run
and writing them to a markdown report file in a date-based directory
(YYYY-MM-DD) when the run ends. Useful for keeping a record of runs
made by the auto-tester.
"""

import logging
import re
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from assay.core.models import ExpectationResult, Outcome
from assay.core.reporter import Reporter

logger = logging.getLogger(__name__)

_OUTCOME_MARKERS = {
    Outcome.SUCCESS: "PASS",
    Outcome.FAILURE: "FAIL",
    Outcome.ERROR: "ERROR",
    Outcome.PENDING: "PENDING",
}


class MarkdownReporter(Reporter):
    """Writes one markdown report per run, organized by date."""

    def __init__(
        self,
        report_dir: str | Path,
        title: str = "assay",
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize markdown reporter.

        Args:
            report_dir: Base directory where date-based subdirectories will
                be created. See _get_report_file_path() for the layout.
            title: Used in the report heading and the file name.
            clock: Returns the current time. Defaults to ``datetime.now(UTC)``.

        Raises:
            ValueError: If report_dir is a filesystem root or not a directory.
            OSError: If the base directory cannot be created.
        """
        super().__init__()
        self.base_dir = Path(report_dir).resolve()

        if self.base_dir.parent == self.base_dir:
            raise ValueError(f"report_dir cannot be a filesystem root: {report_dir}")
        if self.base_dir.exists() and not self.base_dir.is_dir():
            raise ValueError(f"report_dir is not a directory: {report_dir}")

        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OSError(f"Failed to create base directory {report_dir}: {e}") from e

        self.title = title
        self._clock = clock or (lambda: datetime.now(UTC))
        self._started_at: datetime | None = None
        self._sections: list[tuple[str, list[ExpectationResult]]] = []
        self.last_report: Path | None = None

    @staticmethod
    def _sanitize_filename(text: str) -> str:
        """Sanitize a string for use in filenames.

        Replaces every character that is not alphanumeric, an underscore
        or a hyphen with an underscore, and truncates to 100 characters.

        Examples:
            >>> MarkdownReporter._sanitize_filename("my suite")
            'my_suite'
        """
        return re.sub(r"[^\w\-]", "_", text)[:100]

    def _get_report_file_path(self, timestamp: datetime) -> Path:
        """Report path: ``base_dir/YYYY-MM-DD/HH-MM-SS_<title>.md``."""
        date_dir = self.base_dir / timestamp.strftime("%Y-%m-%d")
        filename = f"{timestamp.strftime('%H-%M-%S')}_{self._sanitize_filename(self.title)}.md"
        return date_dir / filename

    # ------------------------------------------------------------------
    # Reporter protocol
    # ------------------------------------------------------------------

    def start_reporter(self) -> None:
        super().start_reporter()
        self._started_at = self._clock()
        self._sections = []

    def start_context(self, description: str) -> None:
        super().start_context(description)
        self._sections.append((description, []))

    def add_result(self, result: ExpectationResult) -> None:
        super().add_result(result)
        if result.file is None:
            result = result.stamped(file=self.state.current_file)
        if not self._sections:
            self._sections.append(("(top level)", []))
        self._sections[-1][1].append(result)

    def end_reporter(self) -> None:
        """Write the report for the finished run.

        Raises:
            OSError: If the report cannot be written.
        """
        super().end_reporter()
        timestamp = self._started_at or self._clock()
        report_file = self._get_report_file_path(timestamp)
        content = self._format_report(timestamp)

        try:
            report_file.parent.mkdir(parents=True, exist_ok=True)
            report_file.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error(
                f"Failed to write markdown report: {e}",
                extra={"path": str(report_file)},
                exc_info=True,
            )
            raise

        self.last_report = report_file
        logger.info(f"Wrote test report to {report_file}")

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def _format_report(self, timestamp: datetime) -> str:
        """Format the whole run as markdown."""
        results = [r for _, section in self._sections for r in section]
        counts = {outcome: 0 for outcome in Outcome}
        for result in results:
            counts[result.outcome] += 1

        lines = [f"## {self.title} test report - {timestamp.isoformat()}", ""]

        lines.append("### Overall Statistics")
        lines.append(f"- **Expectations**: {len(results)}")
        lines.append(f"- **Passed**: {counts[Outcome.SUCCESS]}")
        lines.append(f"- **Failed**: {counts[Outcome.FAILURE]}")
        lines.append(f"- **Errors**: {counts[Outcome.ERROR]}")
        lines.append(f"- **Pending**: {counts[Outcome.PENDING]}")
        lines.append("")

        for description, section in self._sections:
            lines.append(f"### {description}")
            if not section:
                lines.append("_No expectations._")
            for result in section:
                lines.append(self._format_result(result))
            lines.append("")

        lines.append("---")
        return "\n".join(lines)

    @staticmethod
    def _format_result(result: ExpectationResult) -> str:
        marker = _OUTCOME_MARKERS[result.outcome]
        where = ": ".join(part for part in (result.file, result.test) if part)
        prefix = f"- **{marker}**" + (f" {where}" if where else "")
        message = result.message.replace("\n", "\n  ")
        return f"{prefix} - {message}"
