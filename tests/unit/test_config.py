"""Tests for settings and run configuration."""

import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from pkgtest_runner.config import (
    CollectLogFileStage,
    RunConfig,
    Settings,
    get_log_collect_folder,
)
from pkgtest_runner.logfiles.scanner import CollectLogFilesOn


class TestLogCollectFolder:
    """Tests for get_log_collect_folder."""

    def test_defaults_to_temp_dir(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without configuration logs go to the temp dir."""
        monkeypatch.delenv("PKG_TEST_LOG_COLLECT_DIR", raising=False)

        assert get_log_collect_folder() == Path(tempfile.gettempdir()) / "pkgtest-logs"

    def test_reads_environment(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """The environment variable wins over the default."""
        monkeypatch.setenv("PKG_TEST_LOG_COLLECT_DIR", str(tmp_path / "logs"))

        assert get_log_collect_folder() == tmp_path / "logs"

    def test_resolves_relative_paths(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Relative folders resolve against the current directory."""
        monkeypatch.chdir(tmp_path)

        folder = get_log_collect_folder(Settings(log_collect_dir=Path("logs")))

        assert folder == tmp_path / "logs"


class TestRunConfig:
    """Tests for RunConfig."""

    def test_defaults(self) -> None:
        config = RunConfig()

        assert config.timeout_ms == 2000
        assert config.parallel == 4
        assert config.fail_fast is False
        assert list(config.test_names) == []
        assert config.collect_log_files_on is None

    @pytest.mark.parametrize("field", ["timeout_ms", "parallel"])
    def test_rejects_non_positive_values(self, field: str) -> None:
        with pytest.raises(ValidationError):
            RunConfig.model_validate({field: 0})

    def test_parses_log_collection_options(self) -> None:
        """Log collection options parse from their string values."""
        config = RunConfig.model_validate(
            {
                "collect_log_files_on": "error",
                "collect_log_files_stages": ["file-tests", "bin-tests"],
            }
        )

        assert config.collect_log_files_on is CollectLogFilesOn.ERROR
        assert list(config.collect_log_files_stages) == [
            CollectLogFileStage.FILE_TESTS,
            CollectLogFileStage.BIN_TESTS,
        ]

    def test_rejects_unknown_options(self) -> None:
        with pytest.raises(ValidationError):
            RunConfig.model_validate({"retries": 3})
