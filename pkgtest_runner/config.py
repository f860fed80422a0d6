"""Run configuration and environment settings."""

import tempfile
from collections.abc import Sequence
from enum import StrEnum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pkgtest_runner.logfiles.scanner import CollectLogFilesOn
from pkgtest_runner.models.base import Model

DEFAULT_TIMEOUT_MS = 2000
DEFAULT_PARALLEL = 4


class CollectLogFileStage(StrEnum):
    """Stages of a run whose process output is scanned for log files."""

    ALL = "all"
    SETUP = "setup"
    TESTS = "tests"
    FILE_TESTS = "file-tests"
    BIN_TESTS = "bin-tests"
    SCRIPT_TESTS = "script-tests"


class Settings(BaseSettings):
    """Settings read from ``PKG_TEST_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="PKG_TEST_", extra="ignore")

    log_collect_dir: Path | None = None


def get_log_collect_folder(settings: Settings | None = None) -> Path:
    """Folder that collected log files are dumped into so CI can bundle them.

    ``PKG_TEST_LOG_COLLECT_DIR`` wins (relative paths resolve against the
    current directory), otherwise a ``pkgtest-logs`` folder in the temp dir.
    """
    settings = settings or Settings()
    if settings.log_collect_dir is not None:
        return settings.log_collect_dir.absolute()
    return Path(tempfile.gettempdir()) / "pkgtest-logs"


class RunConfig(Model):
    """Options controlling how the runners of a plan are executed."""

    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS, gt=0, description="Per test timeout in ms"
    )
    parallel: int = Field(
        default=DEFAULT_PARALLEL, gt=0, description="Max suites running at a time"
    )
    fail_fast: bool = Field(
        default=False, description="Stop at the first failing test"
    )
    test_names: Sequence[str] = Field(
        default_factory=tuple,
        description="Glob patterns of file tests to run (empty runs all)",
    )
    collect_log_files_on: CollectLogFilesOn | None = Field(
        default=None, description="Which process exits to scan for log files"
    )
    collect_log_files_stages: Sequence[CollectLogFileStage] = Field(
        default_factory=tuple, description="Stages to collect log files for"
    )
