"""Unit tests for the lifecycle controller.

Tests verify that contexts, checks and expectations drive the reporter
protocol in the right order, that faults inside a check become Error
records, and that the active-controller stack is always restored.
"""

import pytest

from assay.core.dsl import active_dsl, bind_dsl
from assay.core.lifecycle import (
    LifecycleController,
    active_controller,
    get_reporter,
    use_controller,
    use_reporter,
)
from assay.core.models import Outcome
from assay.core.predicates import equals
from assay.core.shortcuts import ExpectationShortcuts
from assay.tests.fakes import RecordingReporter


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def controller(reporter: RecordingReporter) -> LifecycleController:
    return LifecycleController(reporter)


class TestContexts:
    """Tests for context open/close transitions."""

    def test_context_then_end(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        controller.context("math")
        controller.end_context()

        assert reporter.calls == [("start_context", "math"), ("end_context", None)]
        assert not controller.context_open

    def test_new_context_closes_previous(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        controller.context("A")
        controller.context("B")

        assert reporter.method_names() == ["start_context", "end_context", "start_context"]
        assert reporter.state.context == "B"

    def test_end_context_when_closed_is_noop(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        controller.end_context()
        controller.end_context()

        assert reporter.calls == []

    def test_finish_closes_open_context(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        controller.context("A")
        controller.finish()

        assert reporter.count("end_context") == 1

    @pytest.mark.parametrize("description", ["", None, 3])
    def test_invalid_context_description(
        self, controller: LifecycleController, reporter: RecordingReporter, description
    ) -> None:
        with pytest.raises(ValueError, match="at least length 1"):
            controller.context(description)
        assert reporter.calls == []


class TestChecks:
    """Tests for test_that and expectation submission."""

    def test_check_brackets_its_results(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        controller.context("math")
        controller.test_that("adds", lambda: controller.expect_that(1 + 1, equals(2)))
        controller.end_context()

        assert reporter.method_names() == [
            "start_context",
            "start_test",
            "add_result",
            "end_test",
            "end_context",
        ]
        result = reporter.results[0]
        assert result.outcome is Outcome.SUCCESS
        assert result.test == "adds"

    def test_failing_expectation_is_reported_not_raised(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        def body() -> None:
            controller.expect_equal(1, 2)
            controller.expect_equal(2, 2)

        controller.test_that("mixed", body)

        assert [r.outcome for r in reporter.results] == [Outcome.FAILURE, Outcome.SUCCESS]
        assert reporter.any_failed

    def test_error_in_body_becomes_error_record(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        def body() -> None:
            controller.expect_true(True)
            raise ZeroDivisionError("division by zero")

        controller.test_that("explodes", body)
        controller.test_that("sibling", lambda: controller.expect_true(True))

        outcomes = [r.outcome for r in reporter.results]
        assert outcomes == [Outcome.SUCCESS, Outcome.ERROR, Outcome.SUCCESS]
        error = reporter.results[1]
        assert error.call_label == "explodes"
        assert "ZeroDivisionError" in error.failure_message
        assert "Traceback" in (error.info or "")
        assert reporter.count("end_test") == 2

    def test_current_test_cleared_after_check(self, controller: LifecycleController) -> None:
        controller.test_that("a", lambda: None)

        assert controller.current_test is None

    def test_bodyless_check_is_pending(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        controller.test_that("later")
        controller.finish()

        assert reporter.method_names() == ["start_test", "add_result", "end_test"]
        result = reporter.results[0]
        assert result.outcome is Outcome.PENDING
        assert result.failure_message == "unknown"
        assert result.test == "later"

    def test_declaration_as_decorator_runs_body(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        @controller.test_that("decorated")
        def _() -> None:
            controller.expect_true(True)

        controller.finish()

        assert [r.outcome for r in reporter.results] == [Outcome.SUCCESS]
        assert reporter.results[0].test == "decorated"

    def test_stale_declaration_cannot_be_applied(self, controller: LifecycleController) -> None:
        declaration = controller.test_that("first")
        controller.test_that("second", lambda: None)

        with pytest.raises(ValueError):
            declaration(lambda: None)

    def test_invalid_check_description(self, controller: LifecycleController) -> None:
        with pytest.raises(ValueError):
            controller.test_that("", lambda: None)

    def test_fail_and_pending(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        def body() -> None:
            controller.fail()
            controller.pending("needs fixtures")

        controller.test_that("forced", body)

        failure, pending = reporter.results
        assert failure.outcome is Outcome.FAILURE
        assert failure.failure_message == "Failure has been forced."
        assert pending.outcome is Outcome.PENDING
        assert pending.failure_message == "needs fixtures"

    def test_top_level_expectation_has_no_test(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        controller.expect_equal(1, 1)

        assert reporter.results[0].test is None
        assert reporter.method_names() == ["add_result"]

    def test_shortcuts_pass_label_and_info(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        controller.expect_equal(3, 2, label="total", info="loop 1")

        message = reporter.results[0].failure_message
        assert message.startswith("total not equal to 2")
        assert message.endswith("\nloop 1")

    def test_shortcuts_need_an_expect_that(self) -> None:
        class Recorder(ExpectationShortcuts):
            def __init__(self) -> None:
                self.seen: list = []

            def expect_that(self, subject, predicate, info=None, label=None) -> None:
                self.seen.append((subject, predicate.name, label))

        with pytest.raises(TypeError):
            ExpectationShortcuts()  # type: ignore[abstract]

        recorder = Recorder()
        recorder.expect_match("abc", "^a", label="text")
        assert recorder.seen == [("abc", "matches('^a')", "text")]

    def test_malformed_expectation_raises(self, controller: LifecycleController) -> None:
        with pytest.raises(TypeError):
            controller.expect_that(1, None)  # type: ignore[arg-type]


class TestDescribe:
    """Tests for describe groupings."""

    def test_it_composes_description(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        with controller.describe("stack") as it:
            it("starts empty", lambda: controller.expect_equal(len([]), 0))

        assert reporter.calls[0] == ("start_test", "stack: starts empty")

    def test_decorator_form(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        @controller.describe("queue")
        def _(it) -> None:
            @it("pops in order")
            def _() -> None:
                controller.expect_true(True)

            it("is pending")

        assert [r.test for r in reporter.results] == ["queue: pops in order", "queue: is pending"]
        assert reporter.results[1].outcome is Outcome.PENDING

    def test_nested_describe_uses_innermost_only(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        with controller.describe("outer"):
            with controller.describe("inner") as inner:
                inner("works", lambda: None)

        assert reporter.calls[0] == ("start_test", "inner: works")

    def test_invalid_it_description(self, controller: LifecycleController) -> None:
        with pytest.raises(ValueError, match="it-description"):
            with controller.describe("group") as it:
                it("", lambda: None)

    def test_invalid_describe_description(self, controller: LifecycleController) -> None:
        with pytest.raises(ValueError):
            controller.describe("")


class TestActiveController:
    """Tests for the active-controller stack."""

    def test_no_active_controller(self) -> None:
        with pytest.raises(RuntimeError):
            active_controller()

    def test_use_controller_restores_on_exit(self, controller: LifecycleController) -> None:
        outer = LifecycleController(RecordingReporter())

        with use_controller(outer):
            with use_controller(controller):
                assert active_controller() is controller
            assert active_controller() is outer

    def test_use_controller_restores_on_error(self, controller: LifecycleController) -> None:
        with pytest.raises(KeyError):
            with use_controller(controller):
                raise KeyError("x")

        with pytest.raises(RuntimeError):
            active_controller()

    def test_use_reporter(self, reporter: RecordingReporter) -> None:
        with use_reporter(reporter) as controller:
            assert get_reporter() is reporter
            assert controller.reporter is reporter


class TestDsl:
    """Tests for the names injected into test code."""

    def test_bind_dsl_is_bound_to_controller(
        self, controller: LifecycleController, reporter: RecordingReporter
    ) -> None:
        names = bind_dsl(controller)

        names["expect_equal"](1, 1)
        names["expect_that"](2, names["not_"](names["equals"](3)))

        assert [r.outcome for r in reporter.results] == [Outcome.SUCCESS, Outcome.SUCCESS]
        assert "test_that" in names
        assert "is_true" in names

    def test_active_dsl_follows_active_controller(self, reporter: RecordingReporter) -> None:
        names = active_dsl()

        with use_reporter(reporter):
            names["context"]("ctx")
            names["expect_true"](False)
            names["end_context"]()

        assert reporter.method_names() == ["start_context", "add_result", "end_context"]
        assert reporter.results[0].outcome is Outcome.FAILURE
