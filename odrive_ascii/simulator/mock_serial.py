"""
Mock serial transport for the controller simulator.

Simulates an ODrive speaking the ASCII protocol without requiring hardware.
"""

import logging
import threading
from typing import Dict, List, Union

from odrive_ascii.protocol.interface import Transport
from odrive_ascii.protocol.enums import AxisState
from odrive_ascii.config.models import SimulatorConfig


logger = logging.getLogger(__name__)


Value = Union[int, float]

# States that run to completion and drop back to IDLE
_SEQUENCE_STATES = {
    AxisState.STARTUP_SEQUENCE,
    AxisState.FULL_CALIBRATION_SEQUENCE,
    AxisState.MOTOR_CALIBRATION,
    AxisState.ENCODER_INDEX_SEARCH,
    AxisState.ENCODER_OFFSET_CALIBRATION,
    AxisState.ENCODER_DIR_FIND,
    AxisState.HOMING,
    AxisState.ENCODER_HALL_POLARITY_CALIBRATION,
    AxisState.ENCODER_HALL_PHASE_CALIBRATION,
    AxisState.ANTICOGGING_CALIBRATION,
}

# Replies of the real firmware
REPLY_INVALID_PROPERTY = "invalid property"
REPLY_INVALID_MOTOR = "invalid motor"
REPLY_INVALID_FORMAT = "invalid command format"
REPLY_UNKNOWN_COMMAND = "unknown command"


class MockODriveSerial(Transport):
    """
    Mock implementation of the serial transport for testing without hardware.

    Commands written with send() are executed immediately against an
    in-memory property tree; replies are queued and handed out by recv()
    in pieces of at most config.chunk_size bytes.
    """

    def __init__(self, config: SimulatorConfig):
        """
        Initialize simulator.

        Args:
            config: Simulator configuration.
        """
        self.config = config
        self._lock = threading.Lock()

        self._input = bytearray()
        self._output = bytearray()
        self.received_lines: List[str] = []

        self._properties: Dict[str, Value] = {}
        self._init_properties()

        logger.info(f"MockODriveSerial initialized ({config.axis_count} axes, firmware {config.firmware_version})")

    def _init_properties(self) -> None:
        major, minor, revision = (int(p) for p in self.config.firmware_version.split("."))
        self._properties.update({
            "fw_version_major": major,
            "fw_version_minor": minor,
            "fw_version_revision": revision,
            "vbus_voltage": 24.0,
        })

        for axis in range(self.config.axis_count):
            prefix = f"axis{axis}"
            self._properties.update({
                f"{prefix}.current_state": self.config.initial_state,
                f"{prefix}.requested_state": int(AxisState.UNDEFINED),
                f"{prefix}.error": 0,
                f"{prefix}.encoder.pos_estimate": 0.0,
                f"{prefix}.encoder.vel_estimate": 0.0,
                f"{prefix}.controller.input_pos": 0.0,
                f"{prefix}.controller.input_vel": 0.0,
                f"{prefix}.controller.input_torque": 0.0,
                f"{prefix}.controller.config.vel_limit": 2.0,
            })

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def send(self, data: bytes) -> None:
        """Feed bytes to the simulated controller, executing complete lines."""
        with self._lock:
            self._input += data
            while b"\n" in self._input:
                raw, _, rest = bytes(self._input).partition(b"\n")
                self._input = bytearray(rest)

                line = raw.decode("ascii", errors="replace").strip("\r")
                self.received_lines.append(line)
                reply = self._execute(line)
                if reply is not None:
                    self._output += (reply + "\r\n").encode("ascii")

    def recv(self, max_length: int) -> bytes:
        """Hand out pending reply bytes, empty when nothing is pending."""
        with self._lock:
            count = min(max_length, self.config.chunk_size, len(self._output))
            data = bytes(self._output[:count])
            del self._output[:count]
            return data

    def inject_output(self, data: bytes) -> None:
        """Queue unsolicited bytes, e.g. a stale reply from an earlier exchange."""
        with self._lock:
            self._output += data

    # ------------------------------------------------------------------
    # Property access for tests
    # ------------------------------------------------------------------

    def get_property(self, path: str) -> Value:
        with self._lock:
            return self._properties[path]

    def set_property(self, path: str, value: Value) -> None:
        with self._lock:
            self._properties[path] = value

    # ------------------------------------------------------------------
    # Command handlers
    # ------------------------------------------------------------------

    def _execute(self, line: str):
        """Run one command line, returning the reply text or None."""
        if not line:
            return None

        parts = line.split()
        cmd, args = parts[0], parts[1:]

        if cmd == "sc":
            return self._handle_clear_errors()
        elif cmd == "p":
            return self._handle_position(args)
        elif cmd == "f":
            return self._handle_feedback(args)
        elif cmd == "r":
            return self._handle_read(args)
        elif cmd == "w":
            return self._handle_write(args)
        else:
            logger.warning(f"[SIMULATOR] Unknown command: {line!r}")
            return REPLY_UNKNOWN_COMMAND

    def _handle_clear_errors(self):
        for axis in range(self.config.axis_count):
            self._properties[f"axis{axis}.error"] = 0
        logger.debug("[SIMULATOR] Errors cleared")
        return None

    def _handle_position(self, args: List[str]):
        if len(args) < 2:
            return REPLY_INVALID_FORMAT

        axis = self._parse_axis(args[0])
        if axis is None:
            return REPLY_INVALID_MOTOR

        try:
            values = [float(a) for a in args[1:4]]
        except ValueError:
            return REPLY_INVALID_FORMAT
        position, vel_ff, torque_ff = (values + [0.0, 0.0])[:3]

        prefix = f"axis{axis}"
        self._properties[f"{prefix}.controller.input_pos"] = position
        self._properties[f"{prefix}.controller.input_vel"] = vel_ff
        self._properties[f"{prefix}.controller.input_torque"] = torque_ff

        # Ideal tracking while the loop is closed
        if self._properties[f"{prefix}.current_state"] == AxisState.CLOSED_LOOP_CONTROL:
            self._properties[f"{prefix}.encoder.pos_estimate"] = position
            self._properties[f"{prefix}.encoder.vel_estimate"] = vel_ff
        return None

    def _handle_feedback(self, args: List[str]):
        if len(args) < 1:
            return REPLY_INVALID_FORMAT

        axis = self._parse_axis(args[0])
        if axis is None:
            return REPLY_INVALID_MOTOR

        pos = self._properties[f"axis{axis}.encoder.pos_estimate"]
        vel = self._properties[f"axis{axis}.encoder.vel_estimate"]
        return f"{_render(pos)} {_render(vel)}"

    def _handle_read(self, args: List[str]):
        if len(args) < 1 or args[0] not in self._properties:
            return REPLY_INVALID_PROPERTY
        return _render(self._properties[args[0]])

    def _handle_write(self, args: List[str]):
        if len(args) < 2 or args[0] not in self._properties:
            return REPLY_INVALID_PROPERTY

        path, text = args[0], args[1]
        try:
            if isinstance(self._properties[path], int):
                value = int(text)
            else:
                value = float(text)
        except ValueError:
            return REPLY_INVALID_FORMAT

        self._properties[path] = value

        if path.endswith(".requested_state"):
            self._apply_requested_state(path[:-len(".requested_state")], value)
        return None

    def _apply_requested_state(self, prefix: str, code: int) -> None:
        try:
            state = AxisState(code)
        except ValueError:
            logger.warning(f"[SIMULATOR] {prefix}: invalid requested state {code}")
            return

        if state in _SEQUENCE_STATES:
            logger.info(f"[SIMULATOR] {prefix}: {state.name} finished")
            state = AxisState.IDLE

        if state != AxisState.UNDEFINED:
            self._properties[f"{prefix}.current_state"] = int(state)
            logger.info(f"[SIMULATOR] {prefix}: state -> {state.name}")

        # Firmware clears the request once it is consumed
        self._properties[f"{prefix}.requested_state"] = int(AxisState.UNDEFINED)

    def _parse_axis(self, text: str):
        try:
            axis = int(text)
        except ValueError:
            return None
        if 0 <= axis < self.config.axis_count:
            return axis
        return None


def _render(value: Value) -> str:
    if isinstance(value, float):
        return repr(value)
    return str(value)
