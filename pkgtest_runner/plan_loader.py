"""Load run plans from YAML and turn them into runners."""

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import ValidationError

from pkgtest_runner.config import RunConfig
from pkgtest_runner.models.plan import BinSuite, FileSuite, RunPlan, ScriptSuite
from pkgtest_runner.reporters.base import Reporter
from pkgtest_runner.runners import BinTestRunner, FileTestRunner, ScriptTestRunner


@dataclass(frozen=True, kw_only=True)
class RunnerSet:
    """Runners of a plan grouped by the kind of tests they run."""

    file: Sequence[FileTestRunner]
    bin: Sequence[BinTestRunner]
    script: Sequence[ScriptTestRunner]


async def load_run_plan(plan_path: Path) -> RunPlan:
    """Load and validate a run plan file.

    Args:
        plan_path: Path to the plan YAML file

    Returns:
        Parsed run plan

    Raises:
        FileNotFoundError: If the plan file does not exist
        ValueError: If the YAML is malformed, empty or fails validation

    """
    if not plan_path.is_file():
        raise FileNotFoundError(f"Plan file not found: {plan_path}")

    content = await asyncio.to_thread(plan_path.read_text)

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {plan_path}: {e}") from e

    if data is None:
        raise ValueError(f"Empty plan file: {plan_path}")

    try:
        return RunPlan.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid run plan schema in {plan_path}: {e}") from e


def build_runners(
    plan: RunPlan,
    reporter: Reporter,
    base_env: Mapping[str, str],
    config: RunConfig | None = None,
) -> RunnerSet:
    """Create one runner per suite of the plan.

    Args:
        plan: Loaded run plan
        reporter: Reporter shared by all runners
        base_env: Environment every test process starts from
        config: Run options overriding the plan's own

    Returns:
        Runners grouped by kind, in plan order

    """
    config = config or plan.config
    file_runners: list[FileTestRunner] = []
    bin_runners: list[BinTestRunner] = []
    script_runners: list[ScriptTestRunner] = []

    for suite in plan.suites:
        common = {
            "run_command": suite.run_command,
            "project_dir": suite.project_dir,
            "target": suite.target,
            "timeout_ms": config.timeout_ms,
            "fail_fast": config.fail_fast,
            "reporter": reporter,
            "base_env": {**base_env, **suite.env},
        }
        match suite:
            case FileSuite():
                file_runners.append(
                    FileTestRunner(
                        **common,
                        run_with=suite.run_with,
                        test_files=suite.files,
                    )
                )
            case BinSuite():
                bin_runners.append(
                    BinTestRunner(
                        **common,
                        bin_tests=suite.bin_tests,
                    )
                )
            case ScriptSuite():
                script_runners.append(
                    ScriptTestRunner(
                        **common,
                        script_tests=suite.script_tests,
                    )
                )

    return RunnerSet(file=file_runners, bin=bin_runners, script=script_runners)
