"""Run one external tool with the PDF bytes piped to its stdin.

:func:`run_tool` is the only place that spawns processes.  Anything
matching the :class:`ToolRunner` signature can be passed instead, which
is how the tests render without poppler installed.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from dataclasses import dataclass, field
from typing import IO, List, Protocol, Sequence

from .errors import PopplerIOError

log = logging.getLogger(__name__)

# Keep error messages and logs readable for chatty tools.
STDERR_TAIL_CHARS = 2000


@dataclass(frozen=True)
class ToolResult:
    """Captured output of a finished tool process."""

    stdout: bytes = field(repr=False)
    stderr: bytes = field(default=b"", repr=False)
    returncode: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def stderr_tail(self, limit: int = STDERR_TAIL_CHARS) -> str:
        """Last *limit* characters of stderr, decoded leniently."""
        return self.stderr.decode("utf-8", errors="replace")[-limit:].strip()


class ToolRunner(Protocol):
    def __call__(
        self, executable: str, args: Sequence[str], stdin_data: bytes
    ) -> ToolResult: ...


def _feed_stdin(stream: IO[bytes], data: bytes, errors: List[OSError]) -> None:
    try:
        with stream:
            stream.write(data)
    except OSError as exc:
        errors.append(exc)


def _drain(stream: IO[bytes], chunks: List[bytes], errors: List[OSError]) -> None:
    try:
        chunks.append(stream.read())
    except OSError as exc:
        errors.append(exc)


def run_tool(executable: str, args: Sequence[str], stdin_data: bytes) -> ToolResult:
    """Spawn *executable*, feed it *stdin_data*, and wait for it to exit.

    stdin is written on one helper thread and stderr drained on another
    while stdout is read here, so no pipe can fill up and stall the tool.

    The exit status is not interpreted here: a failing renderer shows up
    later as output that cannot be parsed or decoded.

    Raises
    ------
    PopplerIOError
        When the process cannot be spawned, written to, read from, or
        waited on.  A tool that exits before consuming all of
        *stdin_data* counts as a write failure.
    """
    cmd = [executable, *args]
    log.debug("Spawning %s (%d bytes on stdin)", cmd, len(stdin_data))
    try:
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as exc:
        raise PopplerIOError(f"Cannot execute {executable!r}: {exc}") from exc

    write_errors: List[OSError] = []
    read_errors: List[OSError] = []
    stderr_chunks: List[bytes] = []
    feeder = threading.Thread(
        target=_feed_stdin, args=(proc.stdin, stdin_data, write_errors), daemon=True
    )
    drainer = threading.Thread(
        target=_drain, args=(proc.stderr, stderr_chunks, read_errors), daemon=True
    )
    feeder.start()
    drainer.start()

    try:
        stdout = proc.stdout.read()
    except OSError as exc:
        proc.kill()
        proc.wait()
        raise PopplerIOError(f"I/O error talking to {executable!r}: {exc}") from exc
    finally:
        feeder.join()
        drainer.join()
        proc.stdout.close()
        proc.stderr.close()

    returncode = proc.wait()
    if write_errors:
        exc = write_errors[0]
        raise PopplerIOError(
            f"I/O error writing PDF to {executable!r} "
            f"(exited with status {returncode}): {exc}"
        ) from exc
    if read_errors:
        exc = read_errors[0]
        raise PopplerIOError(f"I/O error talking to {executable!r}: {exc}") from exc

    result = ToolResult(
        stdout=stdout, stderr=b"".join(stderr_chunks), returncode=returncode
    )
    if not result.ok:
        log.debug(
            "%s exited with status %d: %s",
            executable,
            result.returncode,
            result.stderr_tail(),
        )
    return result
