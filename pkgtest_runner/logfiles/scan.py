"""Find diagnostic log files referenced in process output."""

import os
import re
from collections.abc import Sequence
from pathlib import Path

LOG_FILE_RE = re.compile(r"\S+\.log\b")


def scan_out_for_log_files(output: str, cwd: str | Path) -> Sequence[Path]:
    """Return every ``*.log`` path mentioned in ``output``.

    Package managers print lines like ``A complete log of this run can be
    found in: /npm/_logs/debug-0.log``; bundling those files lets CI keep
    them after the temporary test project is gone.

    Args:
        output: Captured stdout or stderr of a process
        cwd: Working directory of that process, used to resolve relative paths

    Returns:
        Absolute paths in order of appearance

    """
    log_files: list[Path] = []
    for match in LOG_FILE_RE.finditer(output):
        path = Path(match.group(0))
        if not path.is_absolute():
            path = Path(os.path.abspath(Path(cwd) / path))
        log_files.append(path)
    return log_files
