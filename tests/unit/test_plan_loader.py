"""Tests for plan loading and runner construction."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from pkgtest_runner.config import RunConfig
from pkgtest_runner.models.plan import BinSuite, FileSuite, ScriptSuite
from pkgtest_runner.plan_loader import build_runners, load_run_plan
from pkgtest_runner.reporters.base import Reporter

PLAN_YAML = """
version: "1.0"
config:
  timeout_ms: 3000
  parallel: 2
suites:
  - kind: file
    project_dir: /tmp/proj/esm-npm
    run_command: corepack npx tsx
    run_with: tsx
    env:
      NODE_ENV: test
    target:
      entry_alias: entry1
      mod_type: esm
      pkg_manager: npm
      pkg_manager_alias: default
    files:
      - orig: src/test1.ts
        actual: dist/test1.js
  - kind: bin
    project_dir: /tmp/proj/esm-npm
    run_command: corepack npx
    env:
      FROM_SUITE: "1"
    target:
      entry_alias: entry1
      mod_type: esm
      pkg_manager: npm
      pkg_manager_alias: default
    bin_tests:
      mybin:
        - args: --help
        - args: --version
          env:
            DEBUG: "1"
  - kind: script
    project_dir: /tmp/proj/cjs-pnpm
    run_command: corepack pnpm run
    target:
      entry_alias: entry1
      mod_type: commonjs
      pkg_manager: pnpm
      pkg_manager_alias: default
    script_tests:
      - name: lint
"""


@pytest.fixture
def plan_file(tmp_path: Path) -> Path:
    path = tmp_path / "plan.yaml"
    path.write_text(PLAN_YAML)
    return path


class TestLoadRunPlan:
    """Tests for load_run_plan."""

    async def test_loads_valid_plan(self, plan_file: Path) -> None:
        """Test loading a valid plan file."""
        plan = await load_run_plan(plan_file)

        assert plan.version == "1.0"
        assert plan.config.timeout_ms == 3000
        assert plan.config.parallel == 2
        assert [type(suite) for suite in plan.suites] == [FileSuite, BinSuite, ScriptSuite]
        bin_suite = plan.suites[1]
        assert isinstance(bin_suite, BinSuite)
        assert [entry.args for entry in bin_suite.bin_tests["mybin"]] == [
            "--help",
            "--version",
        ]

    async def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Plan file not found"):
            await load_run_plan(tmp_path / "missing.yaml")

    async def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "plan.yaml"
        path.write_text("version: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            await load_run_plan(path)

    async def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "plan.yaml"
        path.write_text("")

        with pytest.raises(ValueError, match="Empty plan file"):
            await load_run_plan(path)

    async def test_invalid_schema(self, tmp_path: Path) -> None:
        """Unknown suite kinds fail validation."""
        path = tmp_path / "plan.yaml"
        path.write_text('version: "1.0"\nsuites:\n  - kind: docker\n')

        with pytest.raises(ValueError, match="Invalid run plan schema"):
            await load_run_plan(path)


class TestBuildRunners:
    """Tests for build_runners."""

    async def test_groups_runners_by_kind(self, plan_file: Path) -> None:
        plan = await load_run_plan(plan_file)
        reporter = Mock(spec=Reporter)

        runners = build_runners(plan, reporter, {"PATH": "/usr/bin"})

        assert len(runners.file) == 1
        assert len(runners.bin) == 1
        assert len(runners.script) == 1
        assert runners.file[0].timeout_ms == 3000
        assert runners.file[0].reporter is reporter
        assert runners.script[0].project_dir == Path("/tmp/proj/cjs-pnpm")

    async def test_suite_env_reaches_tests(self, plan_file: Path) -> None:
        """Suite env is layered over the base env of every kind of runner."""
        plan = await load_run_plan(plan_file)

        runners = build_runners(plan, Mock(spec=Reporter), {"PATH": "/usr/bin"})

        file_runner = runners.file[0]
        assert dict(file_runner.base_env) == {"PATH": "/usr/bin", "NODE_ENV": "test"}
        assert dict(file_runner.planned_tests()[0].env) == {}

        bin_runner = runners.bin[0]
        assert dict(bin_runner.base_env) == {"PATH": "/usr/bin", "FROM_SUITE": "1"}
        assert [dict(p.env) for p in bin_runner.planned_tests()] == [{}, {"DEBUG": "1"}]
        assert dict(runners.script[0].base_env) == {"PATH": "/usr/bin"}

    async def test_config_overrides_plan(self, plan_file: Path) -> None:
        plan = await load_run_plan(plan_file)

        runners = build_runners(
            plan, Mock(spec=Reporter), {}, RunConfig(timeout_ms=100, fail_fast=True)
        )

        assert runners.bin[0].timeout_ms == 100
        assert runners.bin[0].fail_fast is True
