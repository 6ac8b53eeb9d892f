"""Reporter base class and composite reporters.

- Reporter: base implementation of ReporterPort that keeps the
  per-instance lifecycle state (current context, current test,
  any-failed flag). Used directly as the "silent" reporter.
- MultiReporter: fans every call out to an ordered list of reporters.
- ListReporter: collects results, stamped with their file, without
  producing any output.
"""

from collections.abc import Iterable

from .models import ExpectationResult, ReporterState, RunResults
from .ports import ReporterPort


class Reporter(ReporterPort):
    """Base reporter tracking lifecycle state. Produces no output.

    Subclasses override the calls they care about and call ``super()``
    to keep the state current.
    """

    def __init__(self) -> None:
        self.state = ReporterState()

    @property
    def any_failed(self) -> bool:
        return self.state.any_failed

    def start_reporter(self) -> None:
        self.state.any_failed = False

    def start_file(self, filename: str) -> None:
        """Note the file about to run. Not part of the reporter protocol."""
        self.state.current_file = filename

    def start_context(self, description: str) -> None:
        self.state.context = description
        self.state.context_open = True

    def start_test(self, description: str) -> None:
        self.state.test = description

    def add_result(self, result: ExpectationResult) -> None:
        if result.failed:
            self.state.any_failed = True

    def end_test(self) -> None:
        self.state.test = ""

    def end_context(self) -> None:
        self.state.context_open = False

    def end_reporter(self) -> None:
        pass


class MultiReporter(Reporter):
    """Forwards every call to each member reporter, in registration order.

    Forwarding is synchronous. If a member raises, the exception
    propagates immediately and the remaining members are not called for
    that event, which fails the run as a whole.
    """

    def __init__(self, reporters: Iterable[ReporterPort]):
        super().__init__()
        self.reporters: list[ReporterPort] = list(reporters)

    def start_reporter(self) -> None:
        super().start_reporter()
        for reporter in self.reporters:
            reporter.start_reporter()

    def start_file(self, filename: str) -> None:
        super().start_file(filename)
        for reporter in self.reporters:
            if isinstance(reporter, Reporter):
                reporter.start_file(filename)

    def start_context(self, description: str) -> None:
        super().start_context(description)
        for reporter in self.reporters:
            reporter.start_context(description)

    def start_test(self, description: str) -> None:
        super().start_test(description)
        for reporter in self.reporters:
            reporter.start_test(description)

    def add_result(self, result: ExpectationResult) -> None:
        super().add_result(result)
        for reporter in self.reporters:
            reporter.add_result(result)

    def end_test(self) -> None:
        super().end_test()
        for reporter in self.reporters:
            reporter.end_test()

    def end_context(self) -> None:
        super().end_context()
        for reporter in self.reporters:
            reporter.end_context()

    def end_reporter(self) -> None:
        super().end_reporter()
        for reporter in self.reporters:
            reporter.end_reporter()


class ListReporter(Reporter):
    """Accumulates results in order, stamped with the current file.

    Context and test markers produce no output; the accumulated log is
    the only externally meaningful state.
    """

    def __init__(self) -> None:
        super().__init__()
        self._results: list[ExpectationResult] = []

    def add_result(self, result: ExpectationResult) -> None:
        super().add_result(result)
        self._results.append(result.stamped(file=self.state.current_file))

    @property
    def results(self) -> RunResults:
        """Snapshot of the accumulated log."""
        return RunResults(results=tuple(self._results))

    def by_file(self):
        return self.results.by_file()

    def clear(self) -> None:
        """Drop every collected result."""
        self._results.clear()
