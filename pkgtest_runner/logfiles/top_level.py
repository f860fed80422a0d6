"""Creation of the per-run log file scanner from configuration."""

import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from pkgtest_runner.config import CollectLogFileStage, get_log_collect_folder
from pkgtest_runner.logfiles.scanner import CollectLogFilesOn, LogFilesScanner

SETUP_STAGES = frozenset({CollectLogFileStage.ALL, CollectLogFileStage.SETUP})
TESTS_STAGES = frozenset({CollectLogFileStage.ALL, CollectLogFileStage.TESTS})


@dataclass(frozen=True, kw_only=True)
class CollectStages:
    """Which stages of a run should hand the scanner to their processes."""

    setup: bool = False
    file_tests: bool = False
    bin_tests: bool = False
    script_tests: bool = False


@dataclass(frozen=True, kw_only=True)
class ScannerOutput:
    """Top level scanner plus the stages it applies to.

    A missing scanner means that no log collection occurs anywhere.
    """

    top_level_scanner: LogFilesScanner | None = None
    collect: CollectStages = field(default_factory=CollectStages)

    def scanner_for(self, enabled: bool) -> LogFilesScanner | None:
        return self.top_level_scanner if enabled else None


def create_top_level_scanner(
    collect_on: CollectLogFilesOn | None,
    stages: Sequence[CollectLogFileStage] = (),
    root: Path | None = None,
) -> ScannerOutput:
    """Create the scanner for one run according to the configuration.

    Args:
        collect_on: Which exits to scan the output of
        stages: Stages of the run to collect log files for
        root: Folder to create the run folder under (defaults to the
            configured log collect folder)

    Returns:
        The scanner (rooted at a fresh ``run-<ms>`` folder) and stage flags

    Raises:
        ValueError: If only one of collect_on and stages is supplied

    """
    if collect_on is None and not stages:
        return ScannerOutput()
    if collect_on is None or not stages:
        raise ValueError(
            "Must supply both collect_log_files_on and collect_log_files_stages!"
        )

    run_folder = (root or get_log_collect_folder()) / f"run-{time.time_ns() // 1_000_000}"
    run_folder.mkdir(parents=True, exist_ok=True)

    selected = set(stages)
    return ScannerOutput(
        top_level_scanner=LogFilesScanner(run_folder, collect_on),
        collect=CollectStages(
            setup=bool(selected & SETUP_STAGES),
            file_tests=bool(selected & (TESTS_STAGES | {CollectLogFileStage.FILE_TESTS})),
            bin_tests=bool(selected & (TESTS_STAGES | {CollectLogFileStage.BIN_TESTS})),
            script_tests=bool(
                selected & (TESTS_STAGES | {CollectLogFileStage.SCRIPT_TESTS})
            ),
        ),
    )
