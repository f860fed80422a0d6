"""Fixtures for integration tests."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

TARGET = {
    "entry_alias": "entry1",
    "mod_type": "esm",
    "pkg_manager": "npm",
    "pkg_manager_alias": "default",
}


PROJECT_FILES = {
    "tests/ok.sh": "echo ok\n",
    "tests/bad.sh": "echo bad >&2\nexit 1\n",
    "greet.sh": 'echo "hello $1"\n',
    "fail.sh": (
        'echo "npm error A complete log of this run can be found in: logs/debug-0.log"\n'
        "exit 2\n"
    ),
    "hang.sh": (
        'echo "npm error A complete log of this run can be found in: logs/debug-0.log"\n'
        "sleep 5\n"
    ),
    "logs/debug-0.log": "0 verbose cli\n",
    "scripts.sh": 'case "$1" in\n  lint) echo linted ;;\n  *) exit 1 ;;\nesac\n',
}


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a test project with shell scripts standing in for tests."""
    project = tmp_path / "project"
    for name, content in PROJECT_FILES.items():
        path = project / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return project


@pytest.fixture
def write_plan(tmp_path: Path) -> Callable[..., Path]:
    """Return a function that writes a run plan file."""

    def _write_plan(
        suites: list[dict[str, Any]], config: dict[str, Any] | None = None
    ) -> Path:
        path = tmp_path / "plan.yaml"
        path.write_text(
            yaml.safe_dump({"version": "1.0", "config": config or {}, "suites": suites})
        )
        return path

    return _write_plan


@pytest.fixture
def file_suite(project_dir: Path) -> dict[str, Any]:
    return {
        "kind": "file",
        "project_dir": str(project_dir),
        "run_command": "sh",
        "run_with": "node",
        "target": TARGET,
        "files": [
            {"orig": "src/ok.test.ts", "actual": "tests/ok.sh"},
            {"orig": "src/bad.test.ts", "actual": "tests/bad.sh"},
        ],
    }


@pytest.fixture
def bin_suite(project_dir: Path) -> dict[str, Any]:
    return {
        "kind": "bin",
        "project_dir": str(project_dir),
        "run_command": "sh",
        "target": TARGET,
        "bin_tests": {
            "greet.sh": [{"args": "world"}],
            "fail.sh": [{}],
        },
    }


@pytest.fixture
def script_suite(project_dir: Path) -> dict[str, Any]:
    return {
        "kind": "script",
        "project_dir": str(project_dir),
        "run_command": "sh scripts.sh",
        "target": TARGET,
        "script_tests": [{"name": "lint"}],
    }
