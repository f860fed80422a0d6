"""Runner for named package scripts."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import PurePath

from pkgtest_runner.models.descriptor import ScriptTest
from pkgtest_runner.runners.base import PlannedTest, TestRunner


@dataclass(frozen=True, kw_only=True, eq=False)
class ScriptTestRunner(TestRunner):
    """Runs ``<run_command> <script>`` for each script, e.g. ``npm run lint``."""

    script_tests: Sequence[ScriptTest]

    @property
    def suite_label(self) -> str:
        return "Package Scripts"

    def log_scope(self) -> PurePath:
        return self.target.folder_path() / "scripts"

    def planned_tests(self) -> Sequence[PlannedTest]:
        return [
            PlannedTest(
                command=f"{self.run_command} {script.name}",
                test=script,
                log_scope=script.name,
            )
            for script in self.script_tests
        ]
