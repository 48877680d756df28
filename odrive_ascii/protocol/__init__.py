"""
Protocol package for ODrive ASCII serial communication.
"""

from odrive_ascii.protocol.interface import Transport
from odrive_ascii.protocol.odrive_serial import ODriveSerial
from odrive_ascii.protocol.line_reader import LineReader
from odrive_ascii.protocol.enums import AxisState
from odrive_ascii.protocol.encoder import (
    Feedback,
    encode_command,
    format_number,
    parse_feedback,
    parse_float,
    parse_int,
)

__all__ = [
    "Transport",
    "ODriveSerial",
    "LineReader",
    "AxisState",
    "Feedback",
    "encode_command",
    "format_number",
    "parse_feedback",
    "parse_float",
    "parse_int",
]
