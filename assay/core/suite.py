"""Suite discovery and execution.

Test files are plain Python modules executed in a namespace seeded
with the test-writing vocabulary. Helper files (``helper*.py``) run
first into a shared namespace; each test file (``test*.py``) then runs
in its own copy of it, against a fresh lifecycle controller.
"""

import ast
import contextlib
import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .dsl import active_dsl, bind_dsl
from .lifecycle import LifecycleController, use_controller
from .models import RunResults
from .ports import ReporterPort
from .reporter import ListReporter, MultiReporter, Reporter

logger = logging.getLogger(__name__)

HELPER_PATTERN = re.compile(r"^helper.*\.py$", re.IGNORECASE)
TEST_PATTERN = re.compile(r"^test.*\.py$", re.IGNORECASE)

_TEST_PREFIX = re.compile(r"^test[-_]?", re.IGNORECASE)
_PY_SUFFIX = re.compile(r"\.py$", re.IGNORECASE)


def find_files(path: str | Path, pattern: re.Pattern[str]) -> list[Path]:
    """List regular files in ``path`` whose name matches, sorted by name.

    Raises:
        FileNotFoundError: If ``path`` is not an existing directory.
    """
    root = Path(path)
    if not root.is_dir():
        raise FileNotFoundError(f"Test directory does not exist: {root}")
    return sorted(p for p in root.iterdir() if p.is_file() and pattern.search(p.name))


def find_helper_files(path: str | Path) -> list[Path]:
    return find_files(path, HELPER_PATTERN)


def bare_test_name(filename: str) -> str:
    """Strip the test prefix and extension: ``test-parser.py`` -> ``parser``."""
    return _PY_SUFFIX.sub("", _TEST_PREFIX.sub("", filename))


def find_test_files(path: str | Path, filter: str | None = None) -> list[Path]:
    """List test files, optionally narrowed by a regex on the bare name.

    The filter is searched against the name with its ``test``/``test-``/
    ``test_`` prefix and ``.py`` extension removed, so ``filter="parse"``
    selects ``test-parser.py``.
    """
    files = find_files(path, TEST_PATTERN)
    if filter is None:
        return files
    selector = re.compile(filter)
    return [p for p in files if selector.search(bare_test_name(p.name))]


def new_env() -> dict[str, Any]:
    """Fresh namespace for helpers, with the vocabulary bound to the active controller."""
    env: dict[str, Any] = {"__name__": "__assay__"}
    env.update(active_dsl())
    return env


def source_file(path: str | Path, namespace: dict[str, Any]) -> None:
    """Parse ``path`` as a whole and execute it in ``namespace``.

    Raises:
        FileNotFoundError: If the file does not exist.
        TypeError: If ``namespace`` is not a dict.
        SyntaxError: If the file does not parse. Nothing is executed.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Test file does not exist: {path}")
    if not isinstance(namespace, dict):
        raise TypeError(f"namespace must be a dict, got {type(namespace).__name__}")

    source = path.read_text(encoding="utf-8")
    tree = ast.parse(source, filename=str(path))
    namespace["__file__"] = str(path)
    exec(compile(tree, str(path), "exec"), namespace)


def source_dir(
    path: str | Path,
    pattern: re.Pattern[str] | str,
    namespace: dict[str, Any],
    chdir: bool = True,
) -> list[Path]:
    """Source every file in ``path`` matching ``pattern``, in name order.

    Returns:
        The sourced files.
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    root = Path(path).resolve()
    files = find_files(root, pattern)
    with contextlib.chdir(root) if chdir else contextlib.nullcontext():
        for file in files:
            logger.debug(f"Sourcing {file}")
            source_file(file, namespace)
    return files


class SuiteRunner:
    """Runs test files against a reporter and collects their results.

    Each file gets its own LifecycleController, paired with a
    ListReporter so results can be returned per file regardless of what
    the caller's reporter does with them.
    """

    def __init__(self, reporter: ReporterPort | None = None):
        """Initialize the runner.

        Args:
            reporter: Reporter receiving every lifecycle event. If None,
                results are only collected.
        """
        self.reporter = reporter

    def run_dir(
        self,
        path: str | Path,
        filter: str | None = None,
        env: dict[str, Any] | None = None,
    ) -> RunResults:
        """Run every test file in a directory.

        Helper files are sourced into ``env`` first. The reporter sees a
        single ``start_reporter``/``end_reporter`` pair around all files.

        Raises:
            FileNotFoundError: If ``path`` is not a directory.
            ValueError: If no test file matches. The reporter is not called.
        """
        root = Path(path).resolve()
        env = new_env() if env is None else env
        source_dir(root, HELPER_PATTERN, env)

        files = find_test_files(root, filter)
        if not files:
            raise ValueError("No matching test file in dir")

        return self.run_files(files, env)

    def run_file(self, path: str | Path, env: dict[str, Any] | None = None) -> RunResults:
        """Run a single test file with its own reporter start and end."""
        env = new_env() if env is None else env
        return self.run_files([Path(path)], env)

    def run_files(self, files: Iterable[Path], env: dict[str, Any]) -> RunResults:
        """Run ``files`` in order between one ``start_reporter``/``end_reporter`` pair."""
        results = RunResults()
        if self.reporter is not None:
            self.reporter.start_reporter()
        try:
            for file in files:
                results = results.extended(self._run_one(Path(file).resolve(), env))
        finally:
            # A fatal file fault still closes the report before propagating
            if self.reporter is not None:
                self.reporter.end_reporter()

        logger.info(
            f"Ran {len(results)} expectations: {results.passed} passed, "
            f"{results.failures} failed, {results.errors} errors, "
            f"{results.pending} pending"
        )
        return results

    def _run_one(self, path: Path, env: dict[str, Any]) -> RunResults:
        collector = ListReporter()
        members: list[ReporterPort] = [collector]
        if self.reporter is not None:
            members.insert(0, self.reporter)
        reporter: Reporter = MultiReporter(members)

        controller = LifecycleController(reporter)
        namespace = dict(env)
        namespace.update(bind_dsl(controller))

        logger.debug(f"Running {path}")
        with use_controller(controller), contextlib.chdir(path.parent):
            reporter.start_file(path.name)
            try:
                source_file(path, namespace)
            finally:
                controller.finish()
        return collector.results
