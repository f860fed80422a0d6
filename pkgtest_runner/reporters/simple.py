"""Reporter that writes human readable results through a logger."""

import logging
from typing import TYPE_CHECKING

from pkgtest_runner.models.result import TestResult
from pkgtest_runner.overview import GroupOverview
from pkgtest_runner.reporters.base import Reporter

if TYPE_CHECKING:
    from pkgtest_runner.runners.base import TestRunner

STATUS_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
    "skipped": "⏭️",
    "timeout": "⏱️",
}


def describe_suite(runner: "TestRunner") -> str:
    """One line description of the environment variant a runner covers."""
    target = runner.target
    return (
        f"Test Suite for Module {target.mod_type}, Package Manager "
        f"{target.pkg_manager} ({target.pkg_manager_alias}), {runner.suite_label}"
    )


def overview_notice(log: logging.Logger, label: str, overview: GroupOverview) -> None:
    """Log a one line tally like ``File Tests: 1 failed, 3 passed, 4 total``."""
    parts: list[str] = []
    if overview.failed:
        parts.append(f"{overview.failed} failed")
    if overview.skipped:
        parts.append(f"{overview.skipped} skipped")
    if overview.not_reached:
        parts.append(f"{overview.not_reached} not reached")
    parts.append(f"{overview.passed} passed")
    log.info("%s%s, %d total", label, ", ".join(parts), overview.total)


class SimpleReporter(Reporter):
    """Logs every result as it arrives and a tally per runner."""

    def __init__(self, *, debug: bool = False, logger: logging.Logger | None = None) -> None:
        self.debug = debug
        self.log = logger or logging.getLogger(__name__)

    def start(self, runner: "TestRunner") -> None:
        self.log.info(describe_suite(runner))
        self.log.info("Test package location: %s", runner.project_dir)

    def passed(self, result: TestResult) -> None:
        self.log.info(
            "%s Test: %s Passed %d ms\n\t%s",
            STATUS_SYMBOLS["passed"],
            result.name,
            result.elapsed_ms,
            result.command,
        )
        if self.debug and result.stdout:
            self.log.info("%s", result.stdout)

    def failed(self, result: TestResult) -> None:
        symbol = STATUS_SYMBOLS["timeout" if result.timed_out else "failed"]
        self.log.error(
            "%s Test: %s Failed %d ms\n\t%s",
            symbol,
            result.name,
            result.elapsed_ms,
            result.command,
        )
        if result.timed_out:
            self.log.error("Test exceeded timeout: %d ms", result.elapsed_ms)
        if result.stderr:
            self.log.error("%s", result.stderr)

    def skipped(self, result: TestResult) -> None:
        self.log.info(
            "%s Test: %s Skipped %d ms\n\t%s",
            STATUS_SYMBOLS["skipped"],
            result.name,
            result.elapsed_ms,
            result.command,
        )

    def summary(self, overview: GroupOverview) -> None:
        self.log.info(
            "Passed: %d\nFailed: %d\nSkipped: %d\nNot Run: %d\nTotal: %d\n",
            overview.passed,
            overview.failed,
            overview.skipped,
            overview.not_reached,
            overview.total,
        )
