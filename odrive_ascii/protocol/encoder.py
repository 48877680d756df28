"""
Command encoding and response parsing for the ODrive ASCII protocol.
"""

import math
import struct
from dataclasses import dataclass
from typing import Union

from odrive_ascii.utils.exceptions import ResponseParseError


TERMINATOR = "\n"

# Command letters
CMD_CLEAR_ERRORS = "sc"
CMD_POSITION = "p"
CMD_READ = "r"
CMD_WRITE = "w"
CMD_FEEDBACK = "f"

Number = Union[int, float]


@dataclass(frozen=True)
class Feedback:
    """Position [rad] and velocity [rad/s] estimates for one axis."""
    pos: float
    vel: float

    @classmethod
    def invalid(cls) -> "Feedback":
        """Feedback returned when the response could not be parsed."""
        return cls(math.nan, math.nan)

    @property
    def is_valid(self) -> bool:
        """False for the NaN sentinel."""
        return not (math.isnan(self.pos) or math.isnan(self.vel))


def format_number(value: Number) -> str:
    """
    Render a number the way the controller expects it.

    Integral values lose their fractional part, everything else uses the
    shortest round-trip representation.

    Example:
        >>> format_number(0.0), format_number(1.5), format_number(-3)
        ('0', '1.5', '-3')
    """
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)

    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def encode_command(cmd: str, *args) -> bytes:
    """
    Encode a command line.

    Args:
        cmd: Command letter(s), e.g. "p" or "sc".
        *args: Arguments, numbers are rendered with format_number().

    Returns:
        Bytes (one per character, latin-1) terminated by exactly one newline.

    Example:
        >>> encode_command("p", 0, 1.5, 0.0, 0.0)
        b'p 0 1.5 0 0\\n'
    """
    parts = [cmd]
    for arg in args:
        if isinstance(arg, (int, float)):
            parts.append(format_number(arg))
        else:
            parts.append(str(arg))

    return (" ".join(parts) + TERMINATOR).encode("latin-1")


def to_float32(value: float) -> float:
    """Round a Python float to single precision."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def parse_int(text: str) -> int:
    """
    Parse a base-10 integer response.

    Raises:
        ResponseParseError: If text is not a valid integer.
    """
    try:
        return int(text, 10)
    except ValueError:
        raise ResponseParseError(f"Invalid integer response: {text!r}", text)


def parse_float(text: str) -> float:
    """
    Parse a floating point response (single precision).

    Raises:
        ResponseParseError: If text is not a valid number or out of range.
    """
    try:
        return to_float32(float(text))
    except (ValueError, OverflowError):
        raise ResponseParseError(f"Invalid float response: {text!r}", text)


def parse_feedback(text: str) -> Feedback:
    """
    Parse a "<pos> <vel>" feedback line.

    Splits at the first space only. Malformed text never raises, it yields
    Feedback.invalid().

    Example:
        >>> parse_feedback("1.5 -2.25")
        Feedback(pos=1.5, vel=-2.25)
    """
    pos_text, sep, vel_text = text.partition(" ")
    if not sep:
        return Feedback.invalid()

    try:
        return Feedback(parse_float(pos_text), parse_float(vel_text))
    except ResponseParseError:
        return Feedback.invalid()


def describe_command(line: str) -> dict:
    """
    Decode a command line for the protocol log.

    Args:
        line: Command text without terminator.

    Returns:
        Dictionary with cmd, args and a human readable description.
    """
    cmd, _, rest = line.partition(" ")
    args = rest.split(" ") if rest else []

    descriptions = {
        CMD_CLEAR_ERRORS: "Clear Errors",
        CMD_POSITION: f"Set Position axis {args[0]}" if args else "Set Position",
        CMD_READ: f"Read {rest}",
        CMD_WRITE: f"Write {rest}",
        CMD_FEEDBACK: f"Feedback axis {rest}",
    }
    return {
        "cmd": cmd,
        "args": args,
        "description": descriptions.get(cmd, "Unknown command"),
    }
