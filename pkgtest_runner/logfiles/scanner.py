"""Hierarchical, best-effort collection of log files named in process output."""

import logging
import os
import shutil
from enum import Enum, StrEnum
from pathlib import Path

from pkgtest_runner.logfiles.scan import scan_out_for_log_files

log = logging.getLogger(__name__)


class CollectLogFilesOn(StrEnum):
    """When the output of a process is scanned for log files."""

    ERROR = "error"
    ALL = "all"


class ExecExit(Enum):
    """How the process whose output is being scanned exited."""

    NORMAL = "normal"
    ERROR = "error"


class AlreadyCollectedError(Exception):
    """Raised when collect_log_files is called twice on the same scanner."""


class LogFilesScanner:
    """Collects the log files mentioned by the processes of one scope.

    A scanner assumes every message it is fed comes from a process whose
    working directory is passed along with it, and copies whatever it found
    into ``collect_under`` once ``collect_log_files`` is called. Create one
    nested scanner per process so that collection folders stay unique.
    """

    def __init__(self, collect_under: str | Path, collect_on: CollectLogFilesOn) -> None:
        self.collect_under = Path(os.path.abspath(collect_under))
        self.collect_on = collect_on
        self.log_files: set[Path] = set()
        self._collected = False

    def __repr__(self) -> str:
        return f"LogFilesScanner({str(self.collect_under)!r}, {self.collect_on.value!r})"

    @property
    def collected(self) -> bool:
        return self._collected

    def create_nested(self, sub_folder: str | os.PathLike[str]) -> "LogFilesScanner":
        """Return a new scanner collecting under a sub folder of this one."""
        return LogFilesScanner(self.collect_under / sub_folder, self.collect_on)

    def scan_only(self, output: str | bytes, cwd: str | Path, exit: ExecExit) -> None:
        """Register log files mentioned in ``output`` without printing it.

        Output from a normal exit is ignored unless collecting on all exits.
        """
        if exit is ExecExit.NORMAL and self.collect_on is CollectLogFilesOn.ERROR:
            return
        if isinstance(output, bytes):
            output = output.decode(errors="replace")
        self.log_files.update(scan_out_for_log_files(output, cwd))

    def collect_log_files(self) -> None:
        """Copy every registered log file into ``collect_under``.

        Can only be called once. Missing or unreadable files are logged and
        skipped.
        """
        if self._collected:
            raise AlreadyCollectedError("Can only collect log files once!")
        self._collected = True
        if not self.log_files:
            return

        try:
            self.collect_under.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            log.error("Could not create log collection folder %s: %s", self.collect_under, exc)
            return
        for log_file in sorted(self.log_files):
            if not log_file.exists():
                log.warning("Could not collect log file %s", log_file)
                continue
            try:
                shutil.copyfile(log_file, self.collect_under / log_file.name)
            except OSError as exc:
                log.error("Could not collect log file %s: %s", log_file, exc)
