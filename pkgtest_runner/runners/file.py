"""Runner for test files executed by a runtime launcher."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import PurePath

from wcmatch.glob import CASE, GLOBSTAR, globmatch

from pkgtest_runner.models.descriptor import FileTest, RunWith, TestFile, camel_case
from pkgtest_runner.runners.base import PlannedTest, TestRunner


def matches_any(path: str, patterns: Sequence[str]) -> bool:
    """Check a path against glob patterns.

    ``*`` stays within one folder and ``**/`` matches zero or more folders.
    """
    return globmatch(path, list(patterns), flags=GLOBSTAR | CASE)


@dataclass(frozen=True, kw_only=True, eq=False)
class FileTestRunner(TestRunner):
    """Runs each test file with ``<run_command> <file>``."""

    run_with: RunWith
    test_files: Sequence[TestFile]

    @property
    def suite_label(self) -> str:
        return f"Run with {self.run_with}"

    def log_scope(self) -> PurePath:
        return self.target.folder_path() / self.run_with

    def planned_tests(self) -> Sequence[PlannedTest]:
        planned: list[PlannedTest] = []
        for test_file in self.test_files:
            command = f"{self.run_command} {test_file.actual}"
            planned.append(
                PlannedTest(
                    command=command,
                    test=FileTest(
                        orig=test_file.orig, actual=test_file.actual, command=command
                    ),
                    # Flat folder name so that no path can leave the scope
                    log_scope=camel_case(test_file.orig),
                )
            )
        return planned

    def is_filtered_out(self, planned: PlannedTest, test_names: Sequence[str]) -> bool:
        """Skip files whose original path matches none of the patterns."""
        if not test_names or not isinstance(planned.test, FileTest):
            return False
        return not matches_any(planned.test.orig, test_names)
