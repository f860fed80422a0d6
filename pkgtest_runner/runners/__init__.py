"""Test runners, one per environment variant."""

from pkgtest_runner.runners.base import Outcome, RunOptions, TestRunner
from pkgtest_runner.runners.bin import BinTestRunner
from pkgtest_runner.runners.file import FileTestRunner
from pkgtest_runner.runners.script import ScriptTestRunner

__all__ = [
    "BinTestRunner",
    "FileTestRunner",
    "Outcome",
    "RunOptions",
    "ScriptTestRunner",
    "TestRunner",
]
