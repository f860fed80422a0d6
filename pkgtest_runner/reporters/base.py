"""Reporter interface that test runners report their results to."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pkgtest_runner.models.result import TestResult
from pkgtest_runner.overview import GroupOverview

if TYPE_CHECKING:
    from pkgtest_runner.runners.base import TestRunner


class Reporter(ABC):
    """Receives the results of each test and the summary of each runner.

    Test runners never write output themselves; everything human visible
    goes through a reporter.
    """

    @abstractmethod
    def start(self, runner: "TestRunner") -> None:
        """Called when a runner starts, before any of its tests run."""

    @abstractmethod
    def passed(self, result: TestResult) -> None:
        """Called for every test that passed."""

    @abstractmethod
    def failed(self, result: TestResult) -> None:
        """Called for every test that failed (including timeouts)."""

    @abstractmethod
    def skipped(self, result: TestResult) -> None:
        """Called for every test excluded by a filter."""

    @abstractmethod
    def summary(self, overview: GroupOverview) -> None:
        """Called with the finalized overview once a runner is done."""
