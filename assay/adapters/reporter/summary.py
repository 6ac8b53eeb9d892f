"""Summary reporter adapter.

Prints the name of each context followed by one character per
expectation: ``.`` for a success, a running number for a failure or
error, ``P`` for a pending check. The numbered failures are listed in
full when the run ends.
"""

import sys
from typing import TextIO

from assay.core.models import ExpectationResult, Outcome
from assay.core.reporter import Reporter

# Beyond this many failures, only the count is reported
MAX_REPORTED_FAILURES = 50


class SummaryReporter(Reporter):
    """Compact terminal reporter."""

    def __init__(self, stream: TextIO | None = None, max_reports: int = MAX_REPORTED_FAILURES):
        """Initialize summary reporter.

        Args:
            stream: Where to write. Defaults to ``sys.stdout`` at write time.
            max_reports: Failures listed in full at the end of the run.
        """
        super().__init__()
        self._stream = stream
        self.max_reports = max_reports
        self.failures: list[ExpectationResult] = []
        self.pending_count = 0

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def start_reporter(self) -> None:
        super().start_reporter()
        self.failures = []
        self.pending_count = 0

    def start_context(self, description: str) -> None:
        super().start_context(description)
        self._write(f"{description}: ")

    def end_context(self) -> None:
        super().end_context()
        self._write("\n")

    def add_result(self, result: ExpectationResult) -> None:
        super().add_result(result)
        if result.outcome is Outcome.SUCCESS:
            self._write(".")
        elif result.outcome is Outcome.PENDING:
            self.pending_count += 1
            self._write("P")
        else:
            if result.file is None:
                result = result.stamped(file=self.state.current_file)
            self.failures.append(result)
            number = len(self.failures)
            self._write(str(number) if number <= self.max_reports else "F")

    def end_reporter(self) -> None:
        super().end_reporter()
        self._write(self._format_report())

    def _format_report(self) -> str:
        lines = [""]
        if not self.failures:
            lines.append("DONE" if not self.pending_count else f"DONE ({self.pending_count} pending)")
            lines.append("")
            return "\n".join(lines)

        lines.append("=" * 80)
        for number, result in enumerate(self.failures[: self.max_reports], 1):
            lines.append(self._format_failure(number, result))
        hidden = len(self.failures) - self.max_reports
        if hidden > 0:
            lines.append(f"... and {hidden} more failures")
        lines.append("")
        return "\n".join(lines)

    @staticmethod
    def _format_failure(number: int, result: ExpectationResult) -> str:
        kind = "Error" if result.outcome is Outcome.ERROR else "Failure"
        where = ": ".join(part for part in (result.file, result.test) if part)
        header = f"{kind} ({number}): {where or result.call_label}"
        lines = [header, "-" * len(header), result.failure_message]
        if result.outcome is Outcome.ERROR and result.info:
            lines.append(result.info.rstrip())
        lines.append("")
        return "\n".join(lines)
