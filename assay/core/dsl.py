"""Test-writing vocabulary.

Two ways to reach the lifecycle controller:

- ``bind_dsl(controller)`` returns the names a test file sees, bound
  directly to one controller. The suite runner seeds each test file's
  namespace with it.
- ``active_dsl()`` and the module-level functions below delegate to the
  active controller (see ``use_controller``). Helper files and code
  running outside a test file use these.
"""

import functools
from collections.abc import Callable
from typing import Any

from . import predicates
from .expectation import FORCED_FAILURE_MESSAGE, negate, not_
from .lifecycle import Grouping, LifecycleController, active_controller
from .models import ExpectationResult
from .shortcuts import SHORTCUT_NAMES

CONTROLLER_NAMES = (
    "context",
    "end_context",
    "test_that",
    "describe",
    "expect_that",
    "fail",
    "pending",
) + SHORTCUT_NAMES


def _predicate_names() -> dict[str, Any]:
    names: dict[str, Any] = {name: getattr(predicates, name) for name in predicates.__all__}
    names["negate"] = negate
    names["not_"] = not_
    return names


def bind_dsl(controller: LifecycleController) -> dict[str, Any]:
    """Names injected into a test file's namespace, bound to ``controller``."""
    names = {name: getattr(controller, name) for name in CONTROLLER_NAMES}
    names.update(_predicate_names())
    return names


def _delegate(name: str) -> Callable[..., Any]:
    method = getattr(LifecycleController, name)

    @functools.wraps(method)
    def call(*args: Any, **kwargs: Any) -> Any:
        return getattr(active_controller(), name)(*args, **kwargs)

    return call


def active_dsl() -> dict[str, Any]:
    """Same names as ``bind_dsl``, resolved against the active controller."""
    names: dict[str, Any] = {
        "context": context,
        "end_context": end_context,
        "test_that": test_that,
        "describe": describe,
        "expect_that": expect_that,
        "fail": fail,
        "pending": pending,
    }
    names.update({name: _delegate(name) for name in SHORTCUT_NAMES})
    names.update(_predicate_names())
    return names


def context(description: str) -> None:
    active_controller().context(description)


def end_context() -> None:
    active_controller().end_context()


def test_that(description: str, code: Callable[[], Any] | None = None) -> Any:
    return active_controller().test_that(description, code)


# Not a pytest test, despite the name
test_that.__test__ = False  # type: ignore[attr-defined]


def describe(
    description: str, code: Callable[[Callable[..., Any]], Any] | None = None
) -> Grouping:
    return active_controller().describe(description, code)


def expect_that(
    subject: Any,
    predicate: Callable[[Any], ExpectationResult],
    info: str | None = None,
    label: str | None = None,
) -> None:
    active_controller().expect_that(subject, predicate, info=info, label=label)


def fail(message: str = FORCED_FAILURE_MESSAGE) -> None:
    active_controller().fail(message)


def pending(reason: str | None = None) -> None:
    active_controller().pending(reason)
