"""Expectation construction, decoration and negation.

A predicate maps an actual value to an ExpectationResult. This module
provides the helpers that predicates use to build their results, the
negation combinator, and the decoration step that turns a raw predicate
result into the record forwarded to a reporter.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .models import ExpectationResult, Outcome

DEFAULT_LABEL = "value"
DEFAULT_PENDING_REASON = "unknown"
FORCED_FAILURE_MESSAGE = "Failure has been forced."


def expectation(
    passed: bool, failure_message: str, success_message: str
) -> ExpectationResult:
    """Build a Success or Failure result from a boolean outcome."""
    return ExpectationResult(
        outcome=Outcome.SUCCESS if passed else Outcome.FAILURE,
        failure_message=failure_message,
        success_message=success_message,
    )


def pending_expectation(reason: Any = None) -> ExpectationResult:
    """Build a Pending result.

    A missing, empty or non-string reason becomes "unknown".
    """
    if not isinstance(reason, str) or not reason:
        reason = DEFAULT_PENDING_REASON
    return ExpectationResult(
        outcome=Outcome.PENDING,
        failure_message=reason,
        success_message=reason,
        call_label=f"pending({reason!r})",
    )


def forced_failure(message: str = FORCED_FAILURE_MESSAGE) -> ExpectationResult:
    """Build a permanently failing result without evaluating anything."""
    result = expectation(False, message, "This always succeeds.")
    return result.stamped(call_label=f"fail({message!r})")


def error_expectation(error: BaseException, traceback_text: str | None = None) -> ExpectationResult:
    """Build an Error result for a fault raised inside a check body."""
    message = f"Error: {type(error).__name__}: {error}"
    return ExpectationResult(
        outcome=Outcome.ERROR,
        failure_message=message,
        success_message=message,
        info=traceback_text,
    )


@dataclass(frozen=True)
class Predicate:
    """A named pure function from an actual value to an ExpectationResult.

    The name is what appears in call labels, e.g. ``equals(2)``.
    """

    name: str
    check: Callable[[Any], ExpectationResult]

    def __call__(self, actual: Any) -> ExpectationResult:
        return self.check(actual)

    def __repr__(self) -> str:
        return self.name


def negate(predicate: Callable[[Any], ExpectationResult]) -> Predicate:
    """Negate a predicate.

    Flips Success and Failure and swaps the two messages, so that
    ``negate(equals(1))`` reads "value equals 1" when it fails.
    Pending and Error results pass through unchanged.

    Raises:
        TypeError: If ``predicate`` is not callable.
    """
    if not callable(predicate):
        raise TypeError(f"negate() expects a callable predicate, got {predicate!r}")

    def check(actual: Any) -> ExpectationResult:
        result = predicate(actual)
        if result.outcome is Outcome.SUCCESS:
            flipped = Outcome.FAILURE
        elif result.outcome is Outcome.FAILURE:
            flipped = Outcome.SUCCESS
        else:
            return result
        return result.stamped(
            outcome=flipped,
            failure_message=result.success_message,
            success_message=result.failure_message,
        )

    return Predicate(name=f"not({predicate_name(predicate)})", check=check)


# Reads naturally in test files: expect_that(x, not_(equals(2)))
not_ = negate


def predicate_name(predicate: Callable[..., Any]) -> str:
    """Textual name of a predicate for call labels."""
    if isinstance(predicate, Predicate):
        return predicate.name
    return getattr(predicate, "__name__", repr(predicate))


def evaluate(
    subject: Any,
    predicate: Callable[[Any], ExpectationResult],
    info: str | None = None,
    label: str | None = None,
) -> ExpectationResult:
    """Apply ``predicate`` to ``subject`` and decorate the result.

    Both messages are prefixed with the subject's label and, if ``info``
    is given, suffixed with it on a new line. A failing expectation is
    returned as data; this function only raises for malformed input.

    Args:
        subject: The actual value under test.
        predicate: Callable returning an ExpectationResult.
        info: Extra diagnostic text, useful inside loops.
        label: Human label for the subject. Defaults to "value".

    Returns:
        The decorated, immutable result.

    Raises:
        TypeError: If ``predicate`` is not callable or does not return
            an ExpectationResult.
        ValueError: If ``label`` or ``info`` is not a string.
    """
    if not callable(predicate):
        raise TypeError(f"predicate must be callable, got {predicate!r}")
    if label is None:
        label = DEFAULT_LABEL
    elif not isinstance(label, str):
        raise ValueError(f"label must be a string, got {label!r}")
    if info is not None and not isinstance(info, str):
        raise ValueError(f"info must be a string, got {info!r}")

    result = predicate(subject)
    if not isinstance(result, ExpectationResult):
        raise TypeError(
            f"predicate {predicate_name(predicate)} returned {type(result).__name__}, "
            "expected ExpectationResult"
        )
    return decorate(result, label, info, call_label(label, predicate, info))


def decorate(
    result: ExpectationResult,
    label: str,
    info: str | None,
    call: str,
) -> ExpectationResult:
    """Prefix both messages with ``label`` and append ``info`` if present."""
    failure_message = f"{label} {result.failure_message}"
    success_message = f"{label} {result.success_message}"
    if info is not None:
        failure_message = f"{failure_message}\n{info}"
        success_message = f"{success_message}\n{info}"
    return result.stamped(
        failure_message=failure_message,
        success_message=success_message,
        call_label=call,
        info=info,
    )


def call_label(
    label: str, predicate: Callable[..., Any], info: str | None = None
) -> str:
    """Textual representation of the originating ``expect_that`` call."""
    args = [label, predicate_name(predicate)]
    if info is not None:
        args.append(f"info={info!r}")
    return f"expect_that({', '.join(args)})"
