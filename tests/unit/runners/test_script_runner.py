"""Tests for ScriptTestRunner."""

from pathlib import Path, PurePath
from unittest.mock import ANY, AsyncMock, Mock

from pkgtest_runner.models.descriptor import ScriptTest, SuiteTarget
from pkgtest_runner.models.result import TestResult
from pkgtest_runner.runners import RunOptions, ScriptTestRunner
from pkgtest_runner.testing.fakes import STDERR, STDOUT_ON_ERR, ScannerTree, fake_exec

PROJECT_DIR = Path("someDir")
SCRIPT_TESTS = [ScriptTest(name="test"), ScriptTest(name="lint"), ScriptTest(name="build")]


def make_runner(
    target: SuiteTarget, reporter: Mock, *, fail_fast: bool = False
) -> ScriptTestRunner:
    return ScriptTestRunner(
        run_command="npm run",
        project_dir=PROJECT_DIR,
        target=target,
        timeout_ms=5000,
        reporter=reporter,
        base_env={"PATH": "/usr/bin"},
        fail_fast=fail_fast,
        script_tests=SCRIPT_TESTS,
    )


async def test_runs_all_scripts_and_reports_results(
    exec_mock: AsyncMock, reporter: Mock, target: SuiteTarget
) -> None:
    """Runs every script with the script runner prefix."""
    exec_mock.side_effect = fake_exec(failing=["lint"])
    runner = make_runner(target, reporter)

    overview = await runner.run_tests()

    assert overview.passed == 2
    assert overview.failed == 1
    assert overview.skipped == 0
    assert overview.not_reached == 0
    assert overview.total == 3
    assert overview.failed_fast is False
    assert [c.args[0] for c in exec_mock.await_args_list] == [
        "npm run test",
        "npm run lint",
        "npm run build",
    ]
    exec_mock.assert_any_await(
        "npm run lint", cwd=PROJECT_DIR, env={"PATH": "/usr/bin"}, timeout_ms=5000
    )
    reporter.failed.assert_called_once_with(
        TestResult(
            command="npm run lint",
            test=ScriptTest(name="lint"),
            elapsed_ms=ANY,
            stdout=STDOUT_ON_ERR,
            stderr=STDERR,
            timed_out=False,
        )
    )


async def test_stops_at_first_failure_with_fail_fast(
    exec_mock: AsyncMock, reporter: Mock, target: SuiteTarget
) -> None:
    """The script after the failing one never runs."""
    exec_mock.side_effect = fake_exec(failing=["lint"])
    runner = make_runner(target, reporter, fail_fast=True)

    overview = await runner.run_tests()

    assert overview.passed == 1
    assert overview.failed == 1
    assert overview.skipped == 0
    assert overview.not_reached == 1
    assert overview.total == 3
    assert overview.failed_fast is True
    assert exec_mock.await_count == 2


async def test_collects_logs_under_scripts_folder(
    exec_mock: AsyncMock,
    reporter: Mock,
    target: SuiteTarget,
    scanners: ScannerTree,
) -> None:
    """Script logs are scoped by variant, then by script name."""
    runner = make_runner(target, reporter)

    await runner.run_tests(RunOptions(log_files_scanner=scanners.top))

    scanners.top.create_nested.assert_called_once_with(
        PurePath("entry1", "commonjs", "npm", "myalias", "scripts")
    )
    assert [c.args[0] for c in scanners.suite.create_nested.call_args_list] == [
        "test",
        "lint",
        "build",
    ]
