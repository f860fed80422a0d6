"""Models for test execution results."""

from dataclasses import dataclass

from pkgtest_runner.models.descriptor import BinTest, FileTest, ScriptTest


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Result of a single executed (or skipped) test item.

    Handed to the reporter as soon as the item completes and not retained.
    """

    __test__ = False

    command: str
    test: FileTest | BinTest | ScriptTest
    elapsed_ms: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def name(self) -> str:
        """Human readable name: the original file for file tests, else the command."""
        if isinstance(self.test, FileTest):
            return self.test.orig
        return self.command
