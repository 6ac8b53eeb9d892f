"""Shortcut forms of ``expect_that`` for the common predicates.

``expect_equal(x, 2)`` is ``expect_that(x, equals(2))``. The mixin only
requires an ``expect_that`` method on the host class.
"""

from abc import ABC, abstractmethod
from typing import Any

from . import predicates


class ExpectationShortcuts(ABC):
    """Mixin providing ``expect_*`` shortcuts on top of ``expect_that``."""

    @abstractmethod
    def expect_that(
        self,
        subject: Any,
        predicate: Any,
        info: str | None = None,
        label: str | None = None,
    ) -> None:
        """Evaluate ``predicate`` against ``subject`` and record the result."""

    def expect_true(self, subject: Any, info: str | None = None, label: str | None = None) -> None:
        self.expect_that(subject, predicates.is_true(), info=info, label=label)

    def expect_false(self, subject: Any, info: str | None = None, label: str | None = None) -> None:
        self.expect_that(subject, predicates.is_false(), info=info, label=label)

    def expect_none(self, subject: Any, info: str | None = None, label: str | None = None) -> None:
        self.expect_that(subject, predicates.is_none(), info=info, label=label)

    def expect_is(
        self,
        subject: Any,
        cls: type | tuple[type, ...],
        info: str | None = None,
        label: str | None = None,
    ) -> None:
        self.expect_that(subject, predicates.is_a(cls), info=info, label=label)

    def expect_equal(
        self,
        subject: Any,
        expected: Any,
        info: str | None = None,
        label: str | None = None,
        expected_label: str | None = None,
        **tolerance: float,
    ) -> None:
        """Expect equality. ``rel_tol``/``abs_tol`` pass through to ``equals``."""
        self.expect_that(
            subject,
            predicates.equals(expected, label=expected_label, **tolerance),
            info=info,
            label=label,
        )

    def expect_identical(
        self,
        subject: Any,
        expected: Any,
        info: str | None = None,
        label: str | None = None,
        expected_label: str | None = None,
    ) -> None:
        self.expect_that(
            subject,
            predicates.is_identical_to(expected, label=expected_label),
            info=info,
            label=label,
        )

    def expect_match(
        self,
        subject: Any,
        regexp: str,
        info: str | None = None,
        label: str | None = None,
        **options: Any,
    ) -> None:
        self.expect_that(subject, predicates.matches(regexp, **options), info=info, label=label)

    def expect_output(
        self,
        subject: Any,
        regexp: str,
        info: str | None = None,
        label: str | None = None,
        **options: Any,
    ) -> None:
        self.expect_that(subject, predicates.prints_text(regexp, **options), info=info, label=label)

    def expect_error(
        self,
        subject: Any,
        regexp: str | None = None,
        info: str | None = None,
        label: str | None = None,
        **options: Any,
    ) -> None:
        self.expect_that(subject, predicates.throws_error(regexp, **options), info=info, label=label)

    def expect_warning(
        self,
        subject: Any,
        regexp: str | None = None,
        info: str | None = None,
        label: str | None = None,
        **options: Any,
    ) -> None:
        self.expect_that(subject, predicates.gives_warning(regexp, **options), info=info, label=label)

    def expect_keys(
        self,
        subject: Any,
        expected: Any = None,
        info: str | None = None,
        label: str | None = None,
        **options: Any,
    ) -> None:
        self.expect_that(subject, predicates.has_keys(expected, **options), info=info, label=label)

    def expect_less_than(
        self,
        subject: Any,
        expected: Any,
        info: str | None = None,
        label: str | None = None,
        expected_label: str | None = None,
    ) -> None:
        self.expect_that(
            subject,
            predicates.is_less_than(expected, label=expected_label),
            info=info,
            label=label,
        )

    def expect_more_than(
        self,
        subject: Any,
        expected: Any,
        info: str | None = None,
        label: str | None = None,
        expected_label: str | None = None,
    ) -> None:
        self.expect_that(
            subject,
            predicates.is_more_than(expected, label=expected_label),
            info=info,
            label=label,
        )


SHORTCUT_NAMES = tuple(
    name for name in vars(ExpectationShortcuts) if name.startswith("expect_") and name != "expect_that"
)
