"""Run a shell command as a subprocess with a hard timeout."""

import asyncio
import logging
import os
import signal
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ProcessOutput:
    """Captured outcome of a finished (or killed) process."""

    returncode: int | None
    stdout: str
    stderr: str

    @property
    def failed(self) -> bool:
        return self.returncode != 0


async def exec_command(
    command: str,
    *,
    cwd: str | Path,
    env: Mapping[str, str],
    timeout_ms: int,
) -> ProcessOutput:
    """Run ``command`` through the shell and capture its output.

    The process (and anything it started) is killed once ``timeout_ms``
    elapses; a killed process or one that could not be spawned is reported
    with ``returncode=None``. Whatever a killed process printed before the
    deadline is still returned.
    """
    try:
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=cwd,
            env=dict(env),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as exc:
        log.debug("Could not spawn %r in %s: %s", command, cwd, exc)
        return ProcessOutput(returncode=None, stdout="", stderr=str(exc))

    readers = asyncio.gather(_read(process.stdout), _read(process.stderr))

    try:
        await asyncio.wait_for(process.wait(), timeout=timeout_ms / 1000)
    except TimeoutError:
        log.debug("Killing %r after %d ms", command, timeout_ms)
        _kill_process_group(process)
        await process.wait()
        stdout, stderr = await readers
        message = f"Command timed out after {timeout_ms} ms: {command}"
        if stderr and not stderr.endswith("\n"):
            stderr += "\n"
        return ProcessOutput(returncode=None, stdout=stdout, stderr=stderr + message)
    except asyncio.CancelledError:
        _kill_process_group(process)
        readers.cancel()
        raise

    stdout, stderr = await readers
    return ProcessOutput(returncode=process.returncode, stdout=stdout, stderr=stderr)


async def _read(stream: asyncio.StreamReader | None) -> str:
    if stream is None:
        return ""
    return (await stream.read()).decode(errors="replace")


def _kill_process_group(process: asyncio.subprocess.Process) -> None:
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
