"""
Abstract byte transport consumed by the ODrive ASCII client.

Allows transparent substitution between a real serial port and the simulator.
"""

from abc import ABC, abstractmethod


class Transport(ABC):
    """Raw byte transport with a read timeout of its own."""

    @abstractmethod
    def send(self, data: bytes) -> None:
        """
        Transmit raw bytes.

        Args:
            data: Bytes to write.

        Raises:
            NotConnectedError: If the transport is not open.
        """
        pass

    @abstractmethod
    def recv(self, max_length: int) -> bytes:
        """
        Read up to max_length bytes.

        Blocks at most for the transport's own read timeout.

        Args:
            max_length: Maximum number of bytes to return.

        Returns:
            Bytes read, possibly empty if the timeout elapsed ("try again").

        Raises:
            NotConnectedError: If the transport is not open.
        """
        pass

    def drain(self, max_length: int) -> bytes:
        """
        Best-effort read of whatever is pending, used to discard stale input.

        Default implementation is a single recv(); transports that can tell
        how much data is waiting should override it to avoid blocking.

        Args:
            max_length: Maximum number of bytes to discard.

        Returns:
            The discarded bytes.
        """
        return self.recv(max_length)
