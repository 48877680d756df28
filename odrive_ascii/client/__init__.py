"""
Typed client for the ODrive ASCII protocol.
"""

from odrive_ascii.client.odrive_client import ODriveClient
from odrive_ascii.protocol.encoder import Feedback

__all__ = ["ODriveClient", "Feedback"]
