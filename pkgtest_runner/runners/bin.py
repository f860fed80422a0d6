"""Runner for invocations of the binaries a package exposes."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import PurePath

from pkgtest_runner.models.descriptor import BinTest, BinTestEntry
from pkgtest_runner.runners.base import PlannedTest, TestRunner


@dataclass(frozen=True, kw_only=True, eq=False)
class BinTestRunner(TestRunner):
    """Runs ``<run_command> <bin> <args>`` for every configured invocation.

    Name filters do not apply to binary invocations; every one of them runs.
    """

    bin_tests: Mapping[str, Sequence[BinTestEntry]]

    @property
    def suite_label(self) -> str:
        return "Package Bin Commands"

    def log_scope(self) -> PurePath:
        return self.target.folder_path()

    def planned_tests(self) -> Sequence[PlannedTest]:
        planned: list[PlannedTest] = []
        for bin_name, entries in self.bin_tests.items():
            for ordinal, entry in enumerate(entries):
                planned.append(
                    PlannedTest(
                        command=" ".join(
                            part for part in (self.run_command, bin_name, entry.args) if part
                        ),
                        test=BinTest(bin=bin_name, args=entry.args, env=entry.env),
                        env=entry.env or {},
                        log_scope=f"{bin_name}{ordinal}",
                    )
                )
        return planned
