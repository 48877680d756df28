"""
ODrive ASCII protocol client.

Host-side driver for ODrive v3.x, S1 and Pro motor controllers over the
newline-terminated ASCII protocol on USB/UART serial ports.
"""

from odrive_ascii.client import ODriveClient, Feedback
from odrive_ascii.protocol.enums import AxisState

__version__ = "1.0.0"

__all__ = ["ODriveClient", "Feedback", "AxisState"]
