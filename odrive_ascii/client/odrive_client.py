"""
ODrive ASCII protocol client.

Typed operations on top of a string-in/string-out exchange: each call sends
one command line and, for queries, blocks until one response line arrives.

Not thread-safe. Responses carry no request identifier, so callers sharing a
client (or its transport) between threads must serialize access themselves.
"""

import logging
from typing import Optional, Union

from odrive_ascii.protocol.interface import Transport
from odrive_ascii.protocol.line_reader import LineReader
from odrive_ascii.protocol.enums import AxisState
from odrive_ascii.protocol.encoder import (
    CMD_CLEAR_ERRORS,
    CMD_FEEDBACK,
    CMD_POSITION,
    CMD_READ,
    CMD_WRITE,
    Feedback,
    encode_command,
    format_number,
    parse_feedback,
    parse_float,
    parse_int,
)
from odrive_ascii.protocol.logger import ProtocolLogger, get_protocol_logger
from odrive_ascii.config.models import ClientConfig
from odrive_ascii.utils.exceptions import ResponseParseError, SerialTimeoutError


logger = logging.getLogger(__name__)


class ODriveClient:
    """
    Host-side client for ODrive v3.x, S1 and Pro over the ASCII protocol.

    The transport is borrowed: the client never opens or closes it and it
    must stay usable for the client's lifetime.
    """

    def __init__(
        self,
        transport: Transport,
        config: Optional[ClientConfig] = None,
        protocol_logger: Optional[ProtocolLogger] = None
    ):
        """
        Initialize client.

        Args:
            transport: Connected byte transport (real port or simulator).
            config: Client settings. Defaults block indefinitely on reads.
            protocol_logger: TX/RX message log. Defaults to the global one.
        """
        self._transport = transport
        self._config = config or ClientConfig()
        self._protocol_logger = protocol_logger or get_protocol_logger()
        self._reader = LineReader(
            transport,
            buffer_size=self._config.read_buffer_size,
            timeout=self._config.line_timeout_seconds,
        )

    @property
    def transport(self) -> Transport:
        return self._transport

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def clear_errors(self) -> None:
        """Clear the error status of the controller (fire-and-forget)."""
        self._send(CMD_CLEAR_ERRORS)

    def set_position(self, position: float, *args: float, axis: Optional[int] = None) -> None:
        """
        Send a new position setpoint.

        Accepts set_position(position, axis),
        set_position(position, velocity_feedforward, axis) and
        set_position(position, velocity_feedforward, torque_feedforward, axis).
        The axis may also be given as a keyword, with the feedforward terms
        positional.

        Args:
            position: Setpoint [rad].
            *args: Optional velocity feedforward [rad/s] and torque
                feedforward, then the axis number unless passed as keyword.
            axis: Axis number, forwarded unvalidated.

        Raises:
            TypeError: If the axis is missing or too many values are given.
        """
        feedforward = list(args)
        if axis is None:
            if not feedforward:
                raise TypeError("set_position() missing axis")
            axis = feedforward.pop()
        if len(feedforward) > 2:
            raise TypeError(f"set_position() takes at most 2 feedforward terms, got {len(feedforward)}")

        velocity_feedforward, torque_feedforward = (feedforward + [0.0, 0.0])[:2]
        self._send(CMD_POSITION, axis, position, velocity_feedforward, torque_feedforward)

    # ------------------------------------------------------------------
    # Feedback (returns NaN sentinel on malformed response)
    # ------------------------------------------------------------------

    def get_feedback(self, axis: int) -> Feedback:
        """
        Request the latest position and velocity estimates.

        Any bytes already waiting on the transport are drained first so a
        stale line from an earlier exchange is not mistaken for the answer.

        Args:
            axis: Axis number.

        Returns:
            Feedback; Feedback.invalid() (NaN, NaN) if the response is
            malformed.
        """
        stale = self._transport.drain(self._config.read_buffer_size)
        if stale:
            logger.debug(f"Flushed {len(stale)} stale bytes before feedback query")

        self._send(CMD_FEEDBACK, axis)
        response = self._read_line()

        feedback = parse_feedback(response)
        if not feedback.is_valid:
            logger.warning(f"Malformed feedback for axis {axis}: {response!r}")
            self._protocol_logger.log_error("Malformed feedback", response)
        return feedback

    def get_position(self, axis: int) -> float:
        """Position estimate [rad], NaN if the response was malformed."""
        return self.get_feedback(axis).pos

    def get_velocity(self, axis: int) -> float:
        """Velocity estimate [rad/s], NaN if the response was malformed."""
        return self.get_feedback(axis).vel

    # ------------------------------------------------------------------
    # Parameters (raises on malformed response)
    # ------------------------------------------------------------------

    def get_parameter_as_string(self, path: str) -> str:
        """
        Read a parameter.

        Args:
            path: Dot-delimited property, e.g. "axis0.current_state".

        Returns:
            Response line verbatim (terminator removed, nothing else).
        """
        self._send(CMD_READ, path)
        return self._read_line()

    def get_parameter_as_int(self, path: str) -> int:
        """
        Read an integer parameter.

        Raises:
            ResponseParseError: If the response is not a base-10 integer.
        """
        return parse_int(self.get_parameter_as_string(path))

    def get_parameter_as_float(self, path: str) -> float:
        """
        Read a floating point parameter.

        Raises:
            ResponseParseError: If the response is not a number.
        """
        return parse_float(self.get_parameter_as_string(path))

    def set_parameter(self, path: str, value: Union[str, int, float]) -> None:
        """
        Write a parameter (fire-and-forget).

        Args:
            path: Dot-delimited property.
            value: Strings are sent verbatim, numbers in decimal text.

        Raises:
            UnicodeEncodeError: If path or value has characters outside
                latin-1 (one byte per character on the wire).
        """
        if not isinstance(value, str):
            value = format_number(value)
        self._send(CMD_WRITE, path, value)

    # ------------------------------------------------------------------
    # Axis state
    # ------------------------------------------------------------------

    def set_state(self, state: AxisState, axis: int) -> None:
        """
        Request an axis state transition.

        No acknowledgement is read; poll get_state() to confirm.
        """
        self.set_parameter(f"axis{axis}.requested_state", int(state))

    def get_state(self, axis: int) -> AxisState:
        """
        Read the current axis state.

        Returns:
            Current AxisState, or AxisState.UNDEFINED if the response could
            not be read or mapped.
        """
        try:
            code = self.get_parameter_as_int(f"axis{axis}.current_state")
        except (ResponseParseError, SerialTimeoutError) as e:
            logger.warning(f"Could not read state of axis {axis}: {e}")
            return AxisState.UNDEFINED

        state = AxisState.from_code(code)
        if state is AxisState.UNDEFINED and code != AxisState.UNDEFINED:
            logger.warning(f"Unknown state code {code} for axis {axis}")
        return state

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _send(self, cmd: str, *args) -> None:
        packet = encode_command(cmd, *args)
        line = packet.decode("latin-1").rstrip("\n")

        logger.debug(f"TX: {line}")
        self._protocol_logger.log_tx(line)

        self._transport.send(packet)

    def _read_line(self) -> str:
        try:
            line = self._reader.read_line()
        except SerialTimeoutError as e:
            self._protocol_logger.log_error(str(e))
            raise

        logger.debug(f"RX: {line!r}")
        self._protocol_logger.log_rx(line)
        return line
