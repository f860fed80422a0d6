"""Abstract test runner and the primitive that executes a single test."""

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePath
from types import MappingProxyType

from pkgtest_runner.logfiles.scanner import ExecExit, LogFilesScanner
from pkgtest_runner.models.descriptor import BinTest, FileTest, ScriptTest, SuiteTarget
from pkgtest_runner.models.result import TestResult
from pkgtest_runner.overview import GroupOverview
from pkgtest_runner.process import ProcessOutput, exec_command
from pkgtest_runner.reporters.base import Reporter

log = logging.getLogger(__name__)


class Outcome(Enum):
    """Whether the caller may go on with the next unit of work."""

    CONTINUE = "continue"
    STOP = "stop"


@dataclass(frozen=True, kw_only=True)
class RunOptions:
    """Per-run arguments shared by all runners of an orchestration."""

    test_names: Sequence[str] = ()
    log_files_scanner: LogFilesScanner | None = None


@dataclass(frozen=True, kw_only=True)
class PlannedTest:
    """One item of a runner's queue, ready to execute."""

    command: str
    test: FileTest | BinTest | ScriptTest
    env: Mapping[str, str] = field(default_factory=dict)
    log_scope: str


@dataclass(frozen=True, kw_only=True, eq=False)
class TestRunner(ABC):
    """Runs the tests of one environment variant, one at a time, in order.

    Variants only decide which tests exist and how their commands look; the
    loop, the accounting and the fail fast handling live here.
    """

    __test__ = False

    run_command: str
    project_dir: Path
    target: SuiteTarget
    timeout_ms: int
    reporter: Reporter = field(repr=False)
    base_env: Mapping[str, str] = field(default_factory=dict, repr=False)
    fail_fast: bool = False
    group_overview: GroupOverview = field(
        default_factory=GroupOverview, init=False, repr=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_env", MappingProxyType(dict(self.base_env)))

    @property
    @abstractmethod
    def suite_label(self) -> str:
        """Short description of what kind of tests this runner executes."""

    @abstractmethod
    def log_scope(self) -> PurePath:
        """Folder (relative to the top level scanner) for this runner's logs."""

    @abstractmethod
    def planned_tests(self) -> Sequence[PlannedTest]:
        """All tests of this runner in execution order."""

    def is_filtered_out(self, planned: PlannedTest, test_names: Sequence[str]) -> bool:
        """Whether a test is excluded by the name filters of this run."""
        return False

    async def run_tests(self, options: RunOptions | None = None) -> GroupOverview:
        """Run every planned test and return the finalized overview."""
        options = options or RunOptions()
        self.reporter.start(self)
        self.group_overview.start_time()
        planned_tests = self.planned_tests()
        self.group_overview.add_to_total(len(planned_tests))

        scope = None
        if options.log_files_scanner is not None:
            scope = options.log_files_scanner.create_nested(self.log_scope())

        outcome = Outcome.CONTINUE
        try:
            for planned in planned_tests:
                if self.is_filtered_out(planned, options.test_names):
                    self.group_overview.skip(1)
                    self.reporter.skipped(
                        TestResult(command=planned.command, test=planned.test, elapsed_ms=0)
                    )
                    continue
                outcome = await self.exec_test(
                    planned.command,
                    planned.test,
                    env=planned.env,
                    log_files_scanner=(
                        scope.create_nested(planned.log_scope) if scope else None
                    ),
                )
                if outcome is Outcome.STOP:
                    log.debug("Failing fast in %s", self.project_dir)
                    break
        finally:
            self.group_overview.finalize(failed_fast=outcome is Outcome.STOP)

        self.reporter.summary(self.group_overview)
        return self.group_overview

    async def exec_test(
        self,
        command: str,
        test: FileTest | BinTest | ScriptTest,
        *,
        env: Mapping[str, str],
        log_files_scanner: LogFilesScanner | None = None,
    ) -> Outcome:
        """Execute a single test command and record its result.

        Args:
            command: Shell command to run in the project directory
            test: Descriptor of the test, passed through to the reporter
            env: Overrides merged over the runner's base environment
            log_files_scanner: Scanner dedicated to this test, if collecting

        Returns:
            ``Outcome.STOP`` if the test failed and the runner fails fast,
            otherwise ``Outcome.CONTINUE``

        """
        try:
            start = time.monotonic()
            output = await exec_command(
                command,
                cwd=self.project_dir,
                env={**self.base_env, **env},
                timeout_ms=self.timeout_ms,
            )
            elapsed_ms = int((time.monotonic() - start) * 1000)

            if output.failed:
                self.group_overview.fail(1)
                self.reporter.failed(
                    TestResult(
                        command=command,
                        test=test,
                        elapsed_ms=elapsed_ms,
                        stdout=output.stdout,
                        stderr=output.stderr,
                        # No kill signal is surfaced, so long failures count as timeouts
                        timed_out=elapsed_ms >= self.timeout_ms,
                    )
                )
                self._scan(log_files_scanner, output, ExecExit.ERROR)
                return Outcome.STOP if self.fail_fast else Outcome.CONTINUE

            self.group_overview.pass_(1)
            self.reporter.passed(
                TestResult(
                    command=command,
                    test=test,
                    elapsed_ms=elapsed_ms,
                    stdout=output.stdout,
                    stderr=output.stderr,
                )
            )
            self._scan(log_files_scanner, output, ExecExit.NORMAL)
            return Outcome.CONTINUE
        finally:
            if log_files_scanner is not None:
                log_files_scanner.collect_log_files()

    def _scan(
        self,
        log_files_scanner: LogFilesScanner | None,
        output: ProcessOutput,
        exit: ExecExit,
    ) -> None:
        if log_files_scanner is None:
            return
        log_files_scanner.scan_only(output.stdout, self.project_dir, exit)
        log_files_scanner.scan_only(output.stderr, self.project_dir, exit)
