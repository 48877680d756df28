"""
Custom exception classes for the ODrive ASCII client.
"""


class ODriveException(Exception):
    """Base exception for all ODrive client errors."""
    pass


class NotConnectedError(ODriveException):
    """Raised when a transport is used before it was connected."""
    pass


class DriverError(ODriveException):
    """General driver error (port cannot be opened, etc.)."""
    pass


class ProtocolError(ODriveException):
    """ASCII protocol error (malformed or unexpected response)."""
    pass


class ResponseParseError(ProtocolError, ValueError):
    """Response text could not be converted to the requested type."""

    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.text = text


class SerialTimeoutError(ODriveException):
    """No complete response line within the configured line timeout."""
    pass


class PortNotFoundError(DriverError):
    """Serial port does not exist."""
    pass


class PortInUseError(DriverError):
    """Serial port is already open by another application."""
    pass
