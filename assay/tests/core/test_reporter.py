"""Unit tests for the reporter base class and composites.

Tests verify state tracking in Reporter, ordered fan-out in
MultiReporter, and result collection in ListReporter.
"""

import pytest

from assay.core.expectation import expectation, pending_expectation
from assay.core.lifecycle import LifecycleController
from assay.core.models import ExpectationResult, Outcome
from assay.core.ports import ReporterPort
from assay.core.reporter import ListReporter, MultiReporter, Reporter
from assay.tests.fakes import RecordingReporter


def _success() -> ExpectationResult:
    return expectation(True, "bad", "good")


def _failure() -> ExpectationResult:
    return expectation(False, "bad", "good")


class TestReporter:
    """Tests for lifecycle state on the base reporter."""

    def test_is_a_reporter_port(self) -> None:
        assert isinstance(Reporter(), ReporterPort)

    def test_any_failed_is_monotonic_until_restart(self) -> None:
        reporter = Reporter()
        reporter.start_reporter()

        reporter.add_result(_failure())
        reporter.add_result(_success())
        assert reporter.any_failed

        reporter.start_reporter()
        assert not reporter.any_failed

    def test_pending_does_not_count_as_failure(self) -> None:
        reporter = Reporter()
        reporter.add_result(pending_expectation())

        assert not reporter.any_failed

    def test_tracks_context_and_test(self) -> None:
        reporter = Reporter()

        reporter.start_context("ctx")
        reporter.start_test("t")
        assert reporter.state.context == "ctx"
        assert reporter.state.test == "t"
        assert reporter.state.context_open

        reporter.end_test()
        reporter.end_context()
        assert reporter.state.test == ""
        assert not reporter.state.context_open


class TestMultiReporter:
    """Tests for ordered fan-out."""

    def test_forwards_every_call_in_order(self) -> None:
        first, second = RecordingReporter(), RecordingReporter()
        multi = MultiReporter([first, second])
        result = _success()

        multi.start_reporter()
        multi.start_context("c")
        multi.start_test("t")
        multi.add_result(result)
        multi.end_test()
        multi.end_context()
        multi.end_reporter()

        assert first.calls == second.calls
        assert first.method_names() == [
            "start_reporter",
            "start_context",
            "start_test",
            "add_result",
            "end_test",
            "end_context",
            "end_reporter",
        ]
        assert first.results[0] is result

    def test_registration_order(self) -> None:
        order: list[str] = []

        class Named(Reporter):
            def __init__(self, name: str):
                super().__init__()
                self.name = name

            def add_result(self, result: ExpectationResult) -> None:
                super().add_result(result)
                order.append(self.name)

        MultiReporter([Named("a"), Named("b"), Named("c")]).add_result(_success())

        assert order == ["a", "b", "c"]

    def test_member_failure_propagates(self) -> None:
        broken, after = RecordingReporter(), RecordingReporter()
        broken.should_fail = True
        multi = MultiReporter([broken, after])

        with pytest.raises(RuntimeError):
            multi.add_result(_success())
        assert after.calls == []

    def test_start_file_forwarded(self) -> None:
        member = RecordingReporter()
        MultiReporter([member]).start_file("test-a.py")

        assert member.calls == [("start_file", "test-a.py")]
        assert member.state.current_file == "test-a.py"

    def test_own_state_tracks_failures(self) -> None:
        multi = MultiReporter([Reporter()])
        multi.add_result(_failure())

        assert multi.any_failed


class TestListReporter:
    """Tests for result collection."""

    def test_collects_in_order_with_file_stamp(self) -> None:
        collector = ListReporter()
        collector.start_file("test-a.py")
        collector.add_result(_success())
        collector.add_result(_failure())

        results = collector.results
        assert [r.outcome for r in results] == [Outcome.SUCCESS, Outcome.FAILURE]
        assert {r.file for r in results} == {"test-a.py"}
        assert len(results) == 2
        assert results.failures == 1

    def test_by_file_groups_results(self) -> None:
        collector = ListReporter()
        collector.start_file("test-a.py")
        collector.add_result(_success())
        collector.start_file("test-b.py")
        collector.add_result(_failure())
        collector.add_result(_success())

        grouped = collector.by_file()
        assert list(grouped) == ["test-a.py", "test-b.py"]
        assert len(grouped["test-b.py"]) == 2

    def test_clear(self) -> None:
        collector = ListReporter()
        collector.add_result(_success())
        collector.clear()

        assert len(collector.results) == 0

    def test_two_collectors_see_identical_logs(self) -> None:
        """A fan-out of collectors gives each one the same log."""
        one, two = ListReporter(), ListReporter()
        multi = MultiReporter([one, two])
        controller = LifecycleController(multi)

        multi.start_file("test-x.py")
        controller.context("ctx")
        controller.test_that("a", lambda: controller.expect_equal(1, 1))
        controller.test_that("b", lambda: controller.expect_equal(1, 2))
        controller.test_that("c")
        controller.finish()

        assert one.results == two.results
        assert [r.outcome for r in one.results] == [
            Outcome.SUCCESS,
            Outcome.FAILURE,
            Outcome.PENDING,
        ]
