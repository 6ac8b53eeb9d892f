"""Comparison predicates used with ``expect_that``.

Each factory returns a Predicate: a pure function from the actual value
to an ExpectationResult carrying a failure and a success message. The
messages are written to follow the subject's label, e.g.
"total not equal to 3".

Predicates whose subject must be evaluated lazily (``throws_error``,
``prints_text``, ``gives_warning``, ``takes_less_than``) expect a
zero-argument callable as the subject.
"""

import builtins
import contextlib
import io
import math
import numbers
import re
import time
import warnings
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .expectation import Predicate, expectation
from .models import ExpectationResult

# Relative tolerance for numeric equality
DEFAULT_TOLERANCE = 1.5e-8


def _expected_label(expected: Any, label: str | None) -> str:
    if label is None:
        return repr(expected)
    if not isinstance(label, str):
        return repr(label)
    return label


def _require_callable(subject: Any, predicate: str) -> Callable[[], Any]:
    if not callable(subject):
        raise TypeError(f"{predicate} expects a zero-argument callable subject")
    return subject


def is_true() -> Predicate:
    """Expect the value to be exactly ``True``."""
    return Predicate(
        name="is_true()",
        check=lambda x: expectation(x is True, "isn't true", "is true"),
    )


def is_false() -> Predicate:
    """Expect the value to be exactly ``False``."""
    return Predicate(
        name="is_false()",
        check=lambda x: expectation(x is False, "isn't false", "is false"),
    )


def is_none() -> Predicate:
    """Expect the value to be ``None``."""
    return Predicate(
        name="is_none()",
        check=lambda x: expectation(x is None, "isn't None", "is None"),
    )


def is_a(cls: type | tuple[type, ...]) -> Predicate:
    """Expect the value to be an instance of ``cls``."""
    names = (
        ", ".join(c.__name__ for c in cls) if isinstance(cls, tuple) else cls.__name__
    )

    def check(x: Any) -> ExpectationResult:
        return expectation(
            isinstance(x, cls),
            f"is an instance of {type(x).__name__} not {names}",
            f"is an instance of {names}",
        )

    return Predicate(name=f"is_a({names})", check=check)


def _compare(expected: Any, actual: Any, rel_tol: float, abs_tol: float) -> tuple[bool, str]:
    """Equality with numeric tolerance, recursing into sequences and mappings."""
    if isinstance(expected, bool) or isinstance(actual, bool):
        if expected == actual:
            return True, ""
        return False, f"{actual!r} != {expected!r}"
    if isinstance(expected, numbers.Real) and isinstance(actual, numbers.Real):
        difference = abs(actual - expected)
        if expected == 0:
            # No scale to be relative to: compare the absolute difference
            if difference <= max(rel_tol, abs_tol):
                return True, ""
            return False, f"Mean absolute difference: {difference:g}"
        if math.isclose(actual, expected, rel_tol=rel_tol, abs_tol=abs_tol):
            return True, ""
        return False, f"Mean relative difference: {difference / abs(expected):g}"
    if isinstance(expected, Mapping) and isinstance(actual, Mapping):
        if expected.keys() != actual.keys():
            return False, f"Keys differ: {sorted(map(str, expected))} vs {sorted(map(str, actual))}"
        for key in expected:
            same, message = _compare(expected[key], actual[key], rel_tol, abs_tol)
            if not same:
                return False, f"Component {key!r}: {message}"
        return True, ""
    if isinstance(expected, (list, tuple)) and isinstance(actual, (list, tuple)):
        if len(expected) != len(actual):
            return False, f"Lengths ({len(actual)}, {len(expected)}) differ"
        for i, (e, a) in enumerate(zip(expected, actual)):
            same, message = _compare(e, a, rel_tol, abs_tol)
            if not same:
                return False, f"Element {i}: {message}"
        return True, ""
    if expected == actual:
        return True, ""
    return False, f"{actual!r} != {expected!r}"


def equals(
    expected: Any,
    label: str | None = None,
    rel_tol: float = DEFAULT_TOLERANCE,
    abs_tol: float = 0.0,
) -> Predicate:
    """Expect equality, with numeric tolerance for real numbers."""
    expected_label = _expected_label(expected, label)

    def check(actual: Any) -> ExpectationResult:
        same, message = _compare(expected, actual, rel_tol, abs_tol)
        return expectation(
            same,
            f"not equal to {expected_label}\n{message}",
            f"equals {expected_label}",
        )

    return Predicate(name=f"equals({expected_label})", check=check)


def is_identical_to(expected: Any, label: str | None = None) -> Predicate:
    """Expect exact equality and identical type, with no tolerance."""
    expected_label = _expected_label(expected, label)

    def check(actual: Any) -> ExpectationResult:
        identical = type(actual) is type(expected) and actual == expected
        if identical:
            diff = ""
        elif _compare(expected, actual, DEFAULT_TOLERANCE, 0.0)[0]:
            diff = "Objects equal but not identical"
        else:
            diff = f"{actual!r} != {expected!r}"
        return expectation(
            identical,
            f"is not identical to {expected_label}. Differences: \n{diff}",
            f"is identical to {expected_label}",
        )

    return Predicate(name=f"is_identical_to({expected_label})", check=check)


def matches(regexp: str, all: bool = True, flags: int = 0) -> Predicate:
    """Expect a string, or every (or any) string of an iterable, to match.

    Raises:
        TypeError: If ``regexp`` is not a string.
    """
    if not isinstance(regexp, str):
        raise TypeError(f"regexp must be a string, got {regexp!r}")
    pattern = re.compile(regexp, flags)

    def check(actual: Any) -> ExpectationResult:
        if isinstance(actual, (str, bytes)) or not isinstance(actual, Iterable):
            values = [actual if isinstance(actual, str) else str(actual)]
            shown = f"Actual value: {values[0]!r}"
        else:
            values = [str(v) for v in actual]
            shown = "Actual values:\n" + "\n".join(f"* {v!r}" for v in values)
        hits = [pattern.search(v) is not None for v in values]
        ok = bool(hits) and (builtins.all(hits) if all else any(hits))
        return expectation(
            ok,
            f"does not match '{regexp}'. {shown}",
            f"matches '{regexp}'",
        )

    return Predicate(name=f"matches({regexp!r})", check=check)


def has_keys(
    expected: Iterable[str] | None = None,
    ignore_order: bool = False,
    ignore_case: bool = False,
) -> Predicate:
    """Expect a mapping to have keys, or exactly the ``expected`` keys.

    With ``expected`` omitted, any non-empty mapping passes. Key order is
    significant unless ``ignore_order`` is set.
    """
    if expected is None:
        return Predicate(
            name="has_keys()",
            check=lambda x: expectation(
                isinstance(x, Mapping) and len(x) > 0,
                "does not have keys",
                "has keys",
            ),
        )

    def normalise(keys: Iterable[Any]) -> list[str]:
        names = [str(k) for k in keys]
        if ignore_case:
            names = [n.lower() for n in names]
        if ignore_order:
            names = sorted(names)
        return names

    wanted = normalise(expected)

    def check(x: Any) -> ExpectationResult:
        actual = normalise(x.keys()) if isinstance(x, Mapping) else None
        return expectation(
            actual == wanted,
            f"keys don't match {', '.join(wanted)}",
            "keys as expected",
        )

    return Predicate(name=f"has_keys({wanted!r})", check=check)


def is_less_than(expected: Any, label: str | None = None) -> Predicate:
    """Expect the value to be strictly below ``expected``."""
    expected_label = _expected_label(expected, label)

    def check(actual: Any) -> ExpectationResult:
        diff = expected - actual
        return expectation(
            diff > 0,
            f"not less than {expected_label}. Difference: {diff}",
            f"is less than {expected_label}",
        )

    return Predicate(name=f"is_less_than({expected_label})", check=check)


def is_more_than(expected: Any, label: str | None = None) -> Predicate:
    """Expect the value to be strictly above ``expected``."""
    expected_label = _expected_label(expected, label)

    def check(actual: Any) -> ExpectationResult:
        diff = expected - actual
        return expectation(
            diff < 0,
            f"not more than {expected_label}. Difference: {diff}",
            f"is more than {expected_label}",
        )

    return Predicate(name=f"is_more_than({expected_label})", check=check)


def throws_error(
    regexp: str | None = None, error: type[BaseException] = Exception
) -> Predicate:
    """Expect calling the subject to raise ``error``.

    If ``regexp`` is given, the error message must also match it.
    """

    def check(subject: Any) -> ExpectationResult:
        call = _require_callable(subject, "throws_error")
        try:
            call()
        except error as e:
            if regexp is not None:
                return matches(regexp)(str(e))
            return expectation(True, "no error thrown", "threw an error")
        return expectation(
            False, "code did not generate an error", "code generated an error"
        )

    name = f"throws_error({regexp!r})" if regexp is not None else "throws_error()"
    return Predicate(name=name, check=check)


def prints_text(regexp: str, flags: int = 0) -> Predicate:
    """Expect calling the subject to print output matching ``regexp``."""

    def check(subject: Any) -> ExpectationResult:
        call = _require_callable(subject, "prints_text")
        buffer = io.StringIO()
        with contextlib.redirect_stdout(buffer):
            call()
        return matches(regexp, flags=flags)(buffer.getvalue())

    return Predicate(name=f"prints_text({regexp!r})", check=check)


def gives_warning(regexp: str | None = None, all: bool = False) -> Predicate:
    """Expect calling the subject to emit at least one warning.

    If ``regexp`` is given, one warning (or every warning when ``all``)
    must match it.
    """

    def check(subject: Any) -> ExpectationResult:
        call = _require_callable(subject, "gives_warning")
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            call()
        messages = [str(w.message) for w in caught]
        if regexp is not None and messages:
            return matches(regexp, all=all)(messages)
        return expectation(
            len(messages) > 0,
            "no warnings given",
            f"{len(messages)} warnings created",
        )

    name = f"gives_warning({regexp!r})" if regexp is not None else "gives_warning()"
    return Predicate(name=name, check=check)


def takes_less_than(amount: float) -> Predicate:
    """Expect calling the subject to finish in under ``amount`` seconds.

    This is a comparison only: the call is never interrupted.
    """

    def check(subject: Any) -> ExpectationResult:
        call = _require_callable(subject, "takes_less_than")
        start = time.perf_counter()
        call()
        duration = time.perf_counter() - start
        return expectation(
            duration < amount,
            f"took {duration:.3f} seconds, which is more than {amount}",
            f"took {duration:.3f} seconds, which is less than {amount}",
        )

    return Predicate(name=f"takes_less_than({amount})", check=check)


__all__ = [
    "equals",
    "gives_warning",
    "has_keys",
    "is_a",
    "is_false",
    "is_identical_to",
    "is_less_than",
    "is_more_than",
    "is_none",
    "is_true",
    "matches",
    "prints_text",
    "takes_less_than",
    "throws_error",
]
