"""
Newline framing on top of an unframed byte transport.

The reader returns exactly one line per call. Bytes that arrive after the
first newline in the accumulated data are dropped, not carried over to the
next call: one command is assumed to produce at most one line. Pipelined or
concatenated responses lose data. Callers that may see stale input (see
ODriveClient.get_feedback) drain the transport before sending.
"""

import logging
import time
from typing import Optional

from odrive_ascii.protocol.interface import Transport
from odrive_ascii.utils.exceptions import SerialTimeoutError


logger = logging.getLogger(__name__)


class LineReader:
    """Reads newline-terminated lines from a Transport."""

    DEFAULT_BUFFER_SIZE = 256

    def __init__(
        self,
        transport: Transport,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        timeout: Optional[float] = None
    ):
        """
        Initialize line reader.

        Args:
            transport: Byte transport to read from (borrowed, not closed).
            buffer_size: Bytes requested per recv() call.
            timeout: Seconds to wait for a terminator. None blocks until one
                arrives, however long the transport stays silent.
        """
        self._transport = transport
        self._buffer_size = buffer_size
        self._timeout = timeout

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    def read_line(self) -> str:
        """
        Read one line.

        Returns:
            Text preceding the first newline, bytes mapped one-to-one to
            characters.

        Raises:
            SerialTimeoutError: If a timeout is set and no newline arrived
                in time.
        """
        buffer = bytearray()
        deadline = None
        if self._timeout is not None:
            deadline = time.monotonic() + self._timeout

        while True:
            # Zero bytes means the transport timed out, just ask again
            buffer += self._transport.recv(self._buffer_size)
            if b"\n" in buffer:
                break

            if deadline is not None and time.monotonic() >= deadline:
                raise SerialTimeoutError(
                    f"No line terminator within {self._timeout}s "
                    f"({len(buffer)} bytes received)"
                )

        line, _, leftover = bytes(buffer).partition(b"\n")
        if leftover:
            logger.debug(f"Discarding {len(leftover)} bytes after line terminator: {leftover!r}")

        return line.decode("latin-1")
