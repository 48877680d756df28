"""
Serial transport for ODrive USB/UART ports.

Implements Transport using pyserial. The port's read timeout bounds every
recv() call; the client keeps calling recv() until a full line arrived.
"""

import logging
from typing import Optional

import serial

from odrive_ascii.protocol.interface import Transport
from odrive_ascii.config.models import SerialConfig
from odrive_ascii.utils.exceptions import (
    NotConnectedError,
    PortNotFoundError,
    PortInUseError,
)


logger = logging.getLogger(__name__)


class ODriveSerial(Transport):
    """Real hardware transport over a serial port."""

    # Serial port settings (ODrive ASCII protocol is 8N1)
    DATA_BITS = serial.EIGHTBITS
    PARITY = serial.PARITY_NONE
    STOP_BITS = serial.STOPBITS_ONE

    def __init__(self, config: SerialConfig):
        """
        Initialize serial transport.

        Args:
            config: Serial port configuration.
        """
        self._config = config
        self._port: Optional[serial.Serial] = None

    def connect(self) -> None:
        """Open serial port and discard anything already buffered."""
        if self.is_connected():
            logger.warning("Already connected")
            return

        port_name = self._config.port
        logger.info(f"Opening serial port {port_name} at {self._config.baud} baud")

        try:
            self._port = serial.Serial(
                port=port_name,
                baudrate=self._config.baud,
                bytesize=self.DATA_BITS,
                parity=self.PARITY,
                stopbits=self.STOP_BITS,
                timeout=self._config.timeout_seconds,
                write_timeout=self._config.write_timeout_seconds,
            )
        except serial.SerialException as e:
            error_msg = str(e).lower()
            if "filenotfounderror" in error_msg or "no such file" in error_msg:
                raise PortNotFoundError(f"Failed to open {port_name}: Port not found")
            elif "access" in error_msg or "permission" in error_msg or "in use" in error_msg:
                raise PortInUseError(f"{port_name} is already in use by another application")
            else:
                raise PortNotFoundError(f"Failed to open {port_name}: {e}")

        self._port.reset_input_buffer()
        self._port.reset_output_buffer()

    def disconnect(self) -> None:
        """Close serial port connection."""
        if self._port and self._port.is_open:
            self._port.close()
            logger.info("Serial port closed")

        self._port = None

    def is_connected(self) -> bool:
        """Check if the port is open."""
        return self._port is not None and self._port.is_open

    def send(self, data: bytes) -> None:
        port = self._require_port()
        port.write(data)
        port.flush()

    def recv(self, max_length: int) -> bytes:
        """
        Read up to max_length bytes.

        Waits up to the read timeout for the first byte, then returns it
        together with whatever else is already buffered.
        """
        port = self._require_port()

        data = port.read(1)
        if not data or max_length <= 1:
            return data

        waiting = min(port.in_waiting, max_length - 1)
        if waiting:
            data += port.read(waiting)
        return data

    def drain(self, max_length: int) -> bytes:
        """Read only bytes already waiting, never blocks."""
        port = self._require_port()

        waiting = min(port.in_waiting, max_length)
        if not waiting:
            return b""
        return port.read(waiting)

    def _require_port(self) -> serial.Serial:
        if not self.is_connected():
            raise NotConnectedError("Serial port not open")
        return self._port

    def __enter__(self) -> "ODriveSerial":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()
