"""Orchestrates a set of runners of the same kind through the pool."""

import logging
from collections.abc import Sequence

from pkgtest_runner.overview import GroupOverview
from pkgtest_runner.pool import Thunk, pool
from pkgtest_runner.runners.base import Outcome, RunOptions, TestRunner

log = logging.getLogger(__name__)


async def execute_runners(
    runners: Sequence[TestRunner],
    suites_overview: GroupOverview,
    tests_overview: GroupOverview,
    *,
    parallel: int,
    options: RunOptions | None = None,
) -> bool:
    """Run ``runners`` with at most ``parallel`` at a time and roll up results.

    Each runner counts as one suite in ``suites_overview`` (passed when none
    of its tests failed); its individual counts are summed into
    ``tests_overview``. A runner that failed fast stops any further runner
    from being dispatched while the ones already running finish. Both
    overviews are finalized before this returns or raises.

    Args:
        runners: Runners of one kind (file, bin or script tests)
        suites_overview: Overview counting runners
        tests_overview: Overview counting individual tests
        parallel: Maximum number of runners in flight
        options: Arguments passed to every runner's ``run_tests``

    Returns:
        True if every runner ran and none of their tests failed

    """
    options = options or RunOptions()
    all_passed = True
    outcome = Outcome.CONTINUE

    suites_overview.start_time()
    tests_overview.start_time()
    suites_overview.add_to_total(len(runners))

    def make_thunk(runner: TestRunner) -> Thunk:
        async def run_runner() -> Outcome:
            nonlocal all_passed
            summary = await runner.run_tests(options)
            if summary.failed > 0:
                suites_overview.fail(1)
                all_passed = False
            else:
                suites_overview.pass_(1)
            tests_overview.add_to_total(summary.total)
            tests_overview.fail(summary.failed)
            tests_overview.pass_(summary.passed)
            tests_overview.skip(summary.skipped)

            if summary.failed_fast:
                log.info("Tests failed fast in %s", runner.project_dir)
                return Outcome.STOP
            return Outcome.CONTINUE

        return run_runner

    try:
        outcome = await pool([make_thunk(runner) for runner in runners], parallel)
    finally:
        failed_fast = outcome is Outcome.STOP
        tests_overview.finalize(failed_fast=failed_fast)
        suites_overview.finalize(failed_fast=failed_fast)

    return all_passed and outcome is Outcome.CONTINUE
