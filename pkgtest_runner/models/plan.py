"""Models for run plans: materialized projects and the tests to run in them."""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field

from pkgtest_runner.config import RunConfig
from pkgtest_runner.models.base import Model
from pkgtest_runner.models.descriptor import (
    BinTestEntry,
    RunWith,
    ScriptTest,
    SuiteTarget,
    TestFile,
)


class Suite(Model):
    """A materialized test project for one environment variant."""

    project_dir: Path = Field(..., description="Directory of the installed test project")
    target: SuiteTarget = Field(..., description="Environment variant of the project")
    run_command: str = Field(..., description="Command prefix used to run each test")
    env: Mapping[str, str] = Field(
        default_factory=dict, description="Extra environment for every test"
    )


class FileSuite(Suite):
    """Test files run with a runtime launcher (node, tsx, ...)."""

    kind: Literal["file"] = "file"
    run_with: RunWith = Field(..., description="Launcher the files are run with")
    files: Sequence[TestFile] = Field(default_factory=list, description="Test files")


class BinSuite(Suite):
    """Invocations of package binaries."""

    kind: Literal["bin"] = "bin"
    bin_tests: Mapping[str, Sequence[BinTestEntry]] = Field(
        default_factory=dict, description="Invocations keyed by binary name"
    )


class ScriptSuite(Suite):
    """Named package scripts."""

    kind: Literal["script"] = "script"
    script_tests: Sequence[ScriptTest] = Field(
        default_factory=list, description="Scripts to run"
    )


AnySuite = Annotated[FileSuite | BinSuite | ScriptSuite, Field(discriminator="kind")]


class RunPlan(Model):
    """Complete run plan loaded from a plan YAML file."""

    version: str = Field(..., description="Plan schema version")
    config: RunConfig = Field(default_factory=RunConfig, description="Run options")
    suites: Sequence[AnySuite] = Field(default_factory=list, description="Suites to run")
