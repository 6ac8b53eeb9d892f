"""Context/test lifecycle controller.

The controller drives one reporter through the lifecycle of a test
file:

    Idle -> ContextOpen -> (TestRunning -> TestEnd)* -> ContextClosed -> Idle

and exposes the primitives test code uses: ``context``, ``test_that``,
``describe``, ``expect_that``, ``fail`` and ``pending``.

The controller is passed explicitly to whatever needs it (the suite
runner binds its methods into each test file's namespace). For code
that still needs a process-wide "current reporter", controllers are
kept on a stack: ``use_controller`` pushes on entry and pops on every
exit path.
"""

import contextlib
import logging
import traceback
from collections.abc import Callable, Iterator
from typing import Any

from .expectation import (
    FORCED_FAILURE_MESSAGE,
    error_expectation,
    evaluate,
    forced_failure,
    pending_expectation,
)
from .models import ExpectationResult
from .ports import ReporterPort
from .shortcuts import ExpectationShortcuts

logger = logging.getLogger(__name__)

CheckBody = Callable[[], Any]


def validate_description(description: Any, what: str = "description") -> str:
    """Ensure a description is a non-empty string.

    Raises:
        ValueError: If ``description`` is not a string or is empty.
    """
    if not isinstance(description, str) or not description:
        raise ValueError(f"{what} must be a string of at least length 1")
    return description


class Declaration:
    """A check declared without a body.

    Applying it as a decorator supplies the body and runs the check.
    If it is never applied, the controller submits a Pending result
    for it at the next lifecycle event.
    """

    def __init__(self, controller: "LifecycleController", description: str):
        self.controller = controller
        self.description = description

    def __call__(self, code: CheckBody) -> CheckBody:
        self.controller._resolve_declaration(self, code)
        return code


class Grouping:
    """A ``describe`` block.

    Usable as a context manager (yielding ``it``) or as a decorator on a
    function that takes ``it``:

        with describe("stack") as it:
            it("starts empty", lambda: expect_equal(len(Stack()), 0))

        @describe("stack")
        def _(it):
            @it("pushes")
            def _():
                ...

    Only this grouping's description is prefixed to its checks; an
    enclosing ``describe`` does not contribute to the final description.
    """

    def __init__(self, controller: "LifecycleController", description: str):
        self.controller = controller
        self.description = description

    def it(self, description: str, code: CheckBody | None = None) -> Any:
        validate_description(description, "it-description")
        return self.controller.test_that(f"{self.description}: {description}", code)

    def __enter__(self) -> Callable[..., Any]:
        return self.it

    def __exit__(self, *exc_info: Any) -> None:
        self.controller.flush_declaration()

    def __call__(self, code: Callable[[Callable[..., Any]], Any]) -> Callable[..., Any]:
        with self as it:
            code(it)
        return code


class LifecycleController(ExpectationShortcuts):
    """Tracks the current grouping and check, and submits results."""

    def __init__(self, reporter: ReporterPort):
        self.reporter = reporter
        self.context_open = False
        self.current_test: str | None = None
        self._declared: Declaration | None = None

    # ------------------------------------------------------------------
    # Groupings
    # ------------------------------------------------------------------

    def context(self, description: str) -> None:
        """Start a new context, closing the current one if open."""
        validate_description(description, "context description")
        self.flush_declaration()
        if self.context_open:
            self.reporter.end_context()
        self.reporter.start_context(description)
        self.context_open = True

    def end_context(self) -> None:
        """Close the current context. No-op if none is open."""
        self.flush_declaration()
        if not self.context_open:
            return
        self.reporter.end_context()
        self.context_open = False

    def describe(
        self,
        description: str,
        code: Callable[[Callable[..., Any]], Any] | None = None,
    ) -> Grouping:
        """Open a ``describe`` grouping; see Grouping for usage."""
        validate_description(description)
        grouping = Grouping(self, description)
        if code is not None:
            grouping(code)
        return grouping

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def test_that(self, description: str, code: CheckBody | None = None) -> Any:
        """Declare and run a check.

        With ``code``, the check runs immediately. Without it, a
        Declaration is returned for use as a decorator; a declaration
        never given a body becomes a Pending result.

        Any exception raised by the body is recorded as an Error result;
        sibling checks keep running.

        Raises:
            ValueError: If ``description`` is not a non-empty string.
        """
        validate_description(description, "test description")
        self.flush_declaration()
        if code is None:
            self._declared = Declaration(self, description)
            return self._declared
        self._run_check(description, code)
        return code

    def flush_declaration(self) -> None:
        """Submit a Pending result for a declared check that got no body."""
        declared, self._declared = self._declared, None
        if declared is None:
            return
        self.reporter.start_test(declared.description)
        self.current_test = declared.description
        try:
            self.submit(pending_expectation())
        finally:
            self._finish_check()

    def _resolve_declaration(self, declaration: Declaration, code: CheckBody) -> None:
        if self._declared is not declaration:
            raise ValueError(
                f"check {declaration.description!r} was already closed as pending"
            )
        self._declared = None
        self._run_check(declaration.description, code)

    def _run_check(self, description: str, code: CheckBody) -> None:
        self.reporter.start_test(description)
        self.current_test = description
        try:
            code()
        except Exception as e:
            logger.debug(f"Check {description!r} raised {type(e).__name__}: {e}")
            result = error_expectation(e, traceback.format_exc())
            self.submit(result.stamped(call_label=description))
        finally:
            self._finish_check()

    def _finish_check(self) -> None:
        self.current_test = None
        self.reporter.end_test()

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit(self, result: ExpectationResult) -> None:
        """Forward a finished result to the reporter, stamped with the check."""
        if self.current_test is not None:
            result = result.stamped(test=self.current_test)
        self.reporter.add_result(result)

    def expect_that(
        self,
        subject: Any,
        predicate: Callable[[Any], ExpectationResult],
        info: str | None = None,
        label: str | None = None,
    ) -> None:
        """Evaluate ``predicate`` against ``subject`` and report the result.

        A failing expectation is reported, never raised.

        Raises:
            TypeError: If ``predicate`` is not callable.
            ValueError: If ``label`` or ``info`` is not a string.
        """
        self.flush_declaration()
        self.submit(evaluate(subject, predicate, info=info, label=label))

    def fail(self, message: str = FORCED_FAILURE_MESSAGE) -> None:
        """Report a failure without evaluating any predicate."""
        self.flush_declaration()
        self.submit(forced_failure(message))

    def pending(self, reason: str | None = None) -> None:
        """Mark the current check as not yet implemented."""
        self.flush_declaration()
        self.submit(pending_expectation(reason))

    def finish(self) -> None:
        """Close everything still open at the end of a test file."""
        self.end_context()


# ----------------------------------------------------------------------
# Active controller stack
# ----------------------------------------------------------------------

_controllers: list[LifecycleController] = []


@contextlib.contextmanager
def use_controller(controller: LifecycleController) -> Iterator[LifecycleController]:
    """Make ``controller`` the active one for the duration of the block.

    The previous controller is restored on every exit path.
    """
    _controllers.append(controller)
    try:
        yield controller
    finally:
        _controllers.pop()


@contextlib.contextmanager
def use_reporter(reporter: ReporterPort) -> Iterator[LifecycleController]:
    """Shorthand for ``use_controller(LifecycleController(reporter))``."""
    with use_controller(LifecycleController(reporter)) as controller:
        yield controller


def active_controller() -> LifecycleController:
    """Return the innermost active controller.

    Raises:
        RuntimeError: If no controller is active.
    """
    if not _controllers:
        raise RuntimeError(
            "No active reporter. Run tests through SuiteRunner or use_reporter()."
        )
    return _controllers[-1]


def get_reporter() -> ReporterPort:
    """Return the reporter of the innermost active controller."""
    return active_controller().reporter
