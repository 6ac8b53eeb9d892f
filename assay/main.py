"""Composition root for the assay test engine.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module, overridden by CLI flags
- Reporter instantiation
- Core service initialization
- Entry point selection (single run or auto-test watch)
"""

import argparse
import asyncio
import logging
import sys
from typing import Any

from assay.adapters.reporter.markdown import MarkdownReporter
from assay.adapters.reporter.summary import SummaryReporter
from assay.adapters.scheduler.auto_test import AutoTestScheduler
from assay.config import Settings, load_settings
from assay.core.fingerprint import DirectoryFingerprinter
from assay.core.models import FingerprintMode
from assay.core.reporter import Reporter
from assay.core.suite import SuiteRunner
from assay.core.watcher import DirectoryWatcher

REPORTERS = ("summary", "markdown", "silent")


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def build_reporter(name: str, settings: Settings | None = None) -> Reporter:
    """Resolve a reporter short name to an instance.

    Raises:
        ValueError: If the name is unknown.
    """
    settings = settings or Settings()
    if name == "summary":
        return SummaryReporter()
    if name == "markdown":
        return MarkdownReporter(report_dir=settings.report_output_dir)
    if name == "silent":
        return Reporter()
    raise ValueError(f"Unknown reporter: {name}. Choose one of {', '.join(REPORTERS)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="assay", description="Run assay test suites.")
    parser.add_argument("--env-file", help="Path to a .env file with ASSAY_* settings")
    parser.add_argument("--reporter", choices=REPORTERS, help="Reporter to use")
    parser.add_argument("--filter", dest="test_filter", help="Regex selecting test files by name")
    parser.add_argument("--log-level", help="Log level")
    parser.add_argument("--debug", action="store_true", default=None, help="Verbose logging")

    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser("run", help="Run every test file in a directory once")
    run.add_argument("test_path", nargs="?", help="Directory of test files")

    watch = sub.add_parser("watch", help="Re-run tests whenever code or tests change")
    watch.add_argument("test_path", nargs="?", help="Directory of test files")
    watch.add_argument("--code-path", help="Directory of the code under test")
    watch.add_argument("--interval", type=float, dest="watch_interval_seconds", help="Seconds between polls")
    watch.add_argument("--mtime", action="store_const", const="mtime", dest="fingerprint_mode",
                       help="Detect changes by modification time instead of content hash")

    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with every flag given on the command line applied."""
    updates: dict[str, Any] = {}
    for field in (
        "reporter",
        "test_filter",
        "test_path",
        "code_path",
        "watch_interval_seconds",
        "fingerprint_mode",
        "log_level",
        "debug",
    ):
        value = getattr(args, field, None)
        if value is not None:
            updates[field] = value
    if args.command:
        updates["run_mode"] = args.command
    if not updates:
        return settings
    # Re-validate so flags go through the same checks as the environment
    return Settings(**{**settings.model_dump(), **updates})


async def bootstrap(settings: Settings) -> int:
    """Wire components from settings and start the selected run mode.

    Returns:
        Process exit code: 1 if any expectation failed or errored.
    """
    logger = logging.getLogger(__name__)
    logger.info("Loading assay...")

    reporter = build_reporter(settings.reporter, settings)
    logger.info(f"Reporter: {settings.reporter}")
    runner = SuiteRunner(reporter)

    logger.info(f"Starting in {settings.run_mode} mode...")

    if settings.run_mode == "run":
        results = runner.run_dir(settings.test_path, filter=settings.test_filter)
        return 1 if results.any_failed else 0

    watcher = DirectoryWatcher(
        DirectoryFingerprinter(),
        poll_interval_seconds=settings.watch_interval_seconds,
    )
    scheduler = AutoTestScheduler(
        watcher=watcher,
        runner=runner,
        code_path=settings.code_path,
        test_path=settings.test_path,
        test_filter=settings.test_filter,
        mode=FingerprintMode(settings.fingerprint_mode),
    )
    await scheduler.start()
    return 0


def main(argv: list[str] | None = None) -> None:
    """Application entry point.

    Exit codes:
        0: Every expectation passed, or watching ended
        1: A failing or erroring expectation, or a fatal error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(__name__)
    try:
        settings = apply_overrides(load_settings(args.env_file), args)
        level = "DEBUG" if settings.debug else settings.log_level
        configure_logging(level, settings.log_format)
        code = asyncio.run(bootstrap(settings))
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
