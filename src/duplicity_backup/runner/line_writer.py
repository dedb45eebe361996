"""Line framing for subprocess output

duplicity writes its output in arbitrary chunks; the log wants whole
lines. ``frame_lines`` does the splitting without any I/O, the writer feeds
the result into the queue read by the logging thread.
"""

import queue
from typing import List, Optional, Tuple

# Marks the end of the stream for the consumer
END_OF_STREAM = None


def _decode(line: bytes) -> str:
    return line.decode("utf-8", errors="replace")


def frame_lines(buffer: bytes, data: bytes) -> Tuple[List[str], bytes]:
    """Split buffered output into complete lines

    Args:
        buffer: Partial line left over from earlier calls
        data: Newly received bytes

    Returns:
        Tuple of (complete lines without the newline, new buffer)
    """
    buffer += data
    if b"\n" not in buffer:
        return [], buffer

    *complete, rest = buffer.split(b"\n")
    return [_decode(line) for line in complete], rest


class LineQueueWriter:
    """File-like sink forwarding complete lines to a queue

    ``close`` hands over a trailing fragment without newline and then
    END_OF_STREAM.
    """

    def __init__(self, lines: "queue.Queue[Optional[str]]"):
        self._lines = lines
        self._buffer = b""
        self._closed = False

    def write(self, data: bytes) -> int:
        lines, self._buffer = frame_lines(self._buffer, data)
        for line in lines:
            self._lines.put(line)
        return len(data)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        if self._buffer:
            self._lines.put(_decode(self._buffer))
            self._buffer = b""
        self._lines.put(END_OF_STREAM)
