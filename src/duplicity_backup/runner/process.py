"""duplicity process execution

Runs one duplicity invocation and streams its combined stdout/stderr into
the run log while the process is still working.
"""

import io
import queue
import subprocess
import threading
from dataclasses import dataclass
from typing import Mapping, Optional, Pattern, Sequence, cast

from duplicity_backup.exceptions import SubprocessError
from duplicity_backup.logger import Logger
from duplicity_backup.runner.line_writer import END_OF_STREAM, LineQueueWriter

LINE_QUEUE_SIZE = 1000
READ_CHUNK_SIZE = 4096


@dataclass
class RunResult:
    """Outcome of a finished duplicity process"""

    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0


class ProcessRunner:
    """Execute a binary and log its output line by line

    Example:
        runner = ProcessRunner("/usr/bin/duplicity", logger)
        result = runner.run(["-v3", "collection-status", "file:///backups"])
        if not result.success:
            ...
    """

    def __init__(self, binary: str, logger: Logger):
        self.binary = binary
        self.logger = logger

    def run(
        self,
        args: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        line_filter: Optional[Pattern[str]] = None,
    ) -> RunResult:
        """Run the binary to completion

        Args:
            args: Arguments following the binary
            env: Complete process environment (default: inherited)
            line_filter: Only lines matching this pattern are logged

        Returns:
            RunResult carrying the exit code

        Raises:
            SubprocessError: If the process cannot be started
        """
        lines: "queue.Queue[Optional[str]]" = queue.Queue(maxsize=LINE_QUEUE_SIZE)
        consumer = threading.Thread(
            target=self._consume,
            args=(lines, line_filter),
            name="duplicity-output",
            daemon=True,
        )
        # Consumer first, so the bounded queue is always drained
        consumer.start()

        writer = LineQueueWriter(lines)
        try:
            returncode = self._execute(args, env, writer)
        finally:
            writer.close()
            consumer.join()

        return RunResult(returncode=returncode)

    def _execute(
        self,
        args: Sequence[str],
        env: Optional[Mapping[str, str]],
        writer: LineQueueWriter,
    ) -> int:
        try:
            proc = subprocess.Popen(
                [self.binary, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=dict(env) if env is not None else None,
            )
        except OSError as e:
            raise SubprocessError(
                "SPAWN_FAILED",
                f"Unable to start {self.binary}: {e}",
                details={"binary": self.binary},
            ) from e

        # stdout=PIPE always yields a buffered reader
        stdout = cast(io.BufferedReader, proc.stdout)
        with stdout:
            for chunk in iter(lambda: stdout.read1(READ_CHUNK_SIZE), b""):
                writer.write(chunk)

        return proc.wait()

    def _consume(
        self, lines: "queue.Queue[Optional[str]]", line_filter: Optional[Pattern[str]]
    ) -> None:
        while True:
            line = lines.get()
            if line is END_OF_STREAM:
                return
            if line_filter is not None and not line_filter.search(line):
                continue
            self.logger.info(line)
