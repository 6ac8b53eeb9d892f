"""assay: a small test engine with expectations, reporters and auto-testing.

Test files are plain Python executed by ``SuiteRunner``; the names below
are also importable for use outside a suite run:

    from assay import SuiteRunner, SummaryReporter

    SuiteRunner(SummaryReporter()).run_dir("tests")
"""

from assay.adapters.reporter.markdown import MarkdownReporter
from assay.adapters.reporter.summary import SummaryReporter
from assay.core.dsl import (
    context,
    describe,
    end_context,
    expect_that,
    fail,
    pending,
    test_that,
)
from assay.core.expectation import negate, not_
from assay.core.fingerprint import DirectoryFingerprinter
from assay.core.lifecycle import (
    LifecycleController,
    active_controller,
    get_reporter,
    use_controller,
    use_reporter,
)
from assay.core.models import ExpectationResult, Outcome, RunResults
from assay.core.predicates import *  # noqa: F403
from assay.core.predicates import __all__ as _predicate_names
from assay.core.reporter import ListReporter, MultiReporter, Reporter
from assay.core.suite import SuiteRunner, source_dir, source_file
from assay.core.watcher import DirectoryWatcher

__version__ = "0.1.0"

__all__ = [
    "DirectoryFingerprinter",
    "DirectoryWatcher",
    "ExpectationResult",
    "LifecycleController",
    "ListReporter",
    "MarkdownReporter",
    "MultiReporter",
    "Outcome",
    "Reporter",
    "RunResults",
    "SuiteRunner",
    "SummaryReporter",
    "active_controller",
    "context",
    "describe",
    "end_context",
    "expect_that",
    "fail",
    "get_reporter",
    "negate",
    "not_",
    "pending",
    "source_dir",
    "source_file",
    "test_that",
    "use_controller",
    "use_reporter",
    *_predicate_names,
]
