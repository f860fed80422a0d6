"""CLI entry point for running a plan of package test suites."""

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pkgtest_runner.config import RunConfig
from pkgtest_runner.logfiles.scanner import LogFilesScanner
from pkgtest_runner.logfiles.top_level import create_top_level_scanner
from pkgtest_runner.orchestrator import execute_runners
from pkgtest_runner.overview import GroupOverview
from pkgtest_runner.plan_loader import build_runners, load_run_plan
from pkgtest_runner.reporters.simple import SimpleReporter, overview_notice
from pkgtest_runner.runners import RunOptions, TestRunner

LABEL_LENGTH = 20


@dataclass(frozen=True, kw_only=True)
class Phase:
    """Runners of one kind executed together."""

    name: str
    runners: Sequence[TestRunner]
    options: RunOptions


@dataclass(frozen=True, kw_only=True)
class PhaseResult:
    """Finalized overviews of a phase."""

    name: str
    suites: GroupOverview
    tests: GroupOverview
    passed: bool


async def run_phases(phases: Sequence[Phase], parallel: int) -> Sequence[PhaseResult]:
    """Run phases one after another until one of them fails fast.

    Phases after a fail fast are not run; their suites and tests are all
    accounted as not reached.
    """
    results: list[PhaseResult] = []
    stopped = False
    for phase in phases:
        suites = GroupOverview()
        tests = GroupOverview()
        if stopped:
            suites.add_to_total(len(phase.runners))
            tests.add_to_total(sum(len(r.planned_tests()) for r in phase.runners))
            suites.finalize(failed_fast=True)
            tests.finalize(failed_fast=True)
            results.append(PhaseResult(name=phase.name, suites=suites, tests=tests, passed=False))
            continue

        passed = await execute_runners(
            phase.runners, suites, tests, parallel=parallel, options=phase.options
        )
        results.append(PhaseResult(name=phase.name, suites=suites, tests=tests, passed=passed))
        stopped = tests.failed_fast
    return results


def apply_overrides(
    config: RunConfig,
    *,
    test_names: Sequence[str] = (),
    parallel: int | None = None,
    timeout_ms: int | None = None,
    fail_fast: bool = False,
) -> RunConfig:
    """Override plan options with the ones given on the command line."""
    update: dict[str, Any] = {}
    if test_names:
        update["test_names"] = tuple(test_names)
    if parallel is not None:
        update["parallel"] = parallel
    if timeout_ms is not None:
        update["timeout_ms"] = timeout_ms
    if fail_fast:
        update["fail_fast"] = True
    return RunConfig.model_validate({**config.model_dump(), **update})


def log_results_summary(log: logging.Logger, results: Sequence[PhaseResult]) -> None:
    """Log the suite and test tallies plus the time taken by each phase."""
    log.info("=" * 80)
    for result in results:
        overview_notice(log, f"{result.name} Test Suites:".ljust(LABEL_LENGTH), result.suites)
        overview_notice(log, f"{result.name} Tests:".ljust(LABEL_LENGTH), result.tests)
    for result in results:
        log.info(
            "%s %.3f s",
            f"{result.name} Test Time:".ljust(LABEL_LENGTH),
            result.suites.elapsed_ms / 1000,
        )


def overview_to_dict(overview: GroupOverview) -> dict[str, Any]:
    return {
        "total": overview.total,
        "passed": overview.passed,
        "failed": overview.failed,
        "skipped": overview.skipped,
        "not_reached": overview.not_reached,
        "elapsed_ms": overview.elapsed_ms,
        "failed_fast": overview.failed_fast,
    }


def format_output(results: Sequence[PhaseResult]) -> dict[str, Any]:
    """Format phase results for JSON output."""
    return {
        "passed": all(result.passed for result in results),
        "phases": [
            {
                "name": result.name,
                "passed": result.passed,
                "suites": overview_to_dict(result.suites),
                "tests": overview_to_dict(result.tests),
            }
            for result in results
        ],
    }


async def run(
    plan_path: Path,
    *,
    test_names: Sequence[str] = (),
    parallel: int | None = None,
    timeout_ms: int | None = None,
    fail_fast: bool = False,
    debug: bool = False,
) -> int:
    """Run every suite of a plan and return the exit code."""
    log = logging.getLogger("pkgtest_runner")

    log.info("Loading run plan: %s", plan_path)
    plan = await load_run_plan(plan_path)
    config = apply_overrides(
        plan.config,
        test_names=test_names,
        parallel=parallel,
        timeout_ms=timeout_ms,
        fail_fast=fail_fast,
    )

    scanners = create_top_level_scanner(
        config.collect_log_files_on, config.collect_log_files_stages
    )
    if scanners.top_level_scanner is not None:
        log.info("Collecting log files under %s", scanners.top_level_scanner.collect_under)

    runners = build_runners(plan, SimpleReporter(debug=debug), dict(os.environ), config)
    phases = [
        Phase(
            name="File",
            runners=runners.file,
            options=_options(config.test_names, scanners.scanner_for(scanners.collect.file_tests)),
        ),
        Phase(
            name="Bin",
            runners=runners.bin,
            options=_options((), scanners.scanner_for(scanners.collect.bin_tests)),
        ),
        Phase(
            name="Script",
            runners=runners.script,
            options=_options((), scanners.scanner_for(scanners.collect.script_tests)),
        ),
    ]

    log.info("Running %d suite(s)...", len(plan.suites))
    results = await run_phases(phases, config.parallel)

    log_results_summary(log, results)
    output = format_output(results)
    print(json.dumps(output, indent=2))

    return 0 if output["passed"] else 1


def _options(test_names: Sequence[str], scanner: LogFilesScanner | None) -> RunOptions:
    return RunOptions(test_names=test_names, log_files_scanner=scanner)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run package test suites against their environment variants"
    )
    parser.add_argument(
        "--plan",
        type=Path,
        required=True,
        help="Path to the run plan YAML file",
    )
    parser.add_argument(
        "--test-names",
        nargs="*",
        default=[],
        help="Glob patterns of test files to run (others are skipped)",
    )
    parser.add_argument(
        "--parallel",
        type=int,
        default=None,
        help="Maximum number of suites running at a time",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help="Per test timeout in milliseconds",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first failing test",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log the output of passing tests",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            args.plan,
            test_names=args.test_names,
            parallel=args.parallel,
            timeout_ms=args.timeout,
            fail_fast=args.fail_fast,
            debug=args.debug,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
