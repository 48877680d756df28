"""
Configuration models using Pydantic for validation.

All configuration is loaded from config.json and validated at startup.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SerialConfig(BaseModel):
    """Serial port configuration."""

    port: str = Field(default="/dev/ttyACM0", description="Serial port name (e.g., /dev/ttyACM0, COM3)")
    baud: int = Field(default=115200, ge=1, description="Baud rate")
    timeout_seconds: float = Field(
        default=0.1, gt=0, le=30, description="Read timeout per recv() call in seconds"
    )
    write_timeout_seconds: float = Field(
        default=1.0, gt=0, le=30, description="Write timeout in seconds"
    )


class ClientConfig(BaseModel):
    """Protocol client configuration."""

    read_buffer_size: int = Field(
        default=256, ge=1, le=65536, description="Bytes requested per transport read"
    )
    line_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Give up waiting for a response line after this many seconds (None blocks forever)"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    file: Optional[str] = Field(
        default=None,
        description="Log file path (None for console only)"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class SimulatorConfig(BaseModel):
    """Controller simulator configuration."""

    enabled: bool = Field(default=False, description="Use simulator instead of real hardware")
    axis_count: int = Field(default=2, ge=1, le=8, description="Number of simulated axes")
    chunk_size: int = Field(
        default=64, ge=1, description="Maximum bytes delivered per recv() call"
    )
    initial_state: int = Field(default=1, ge=0, description="Initial axis state code (1 = IDLE)")
    firmware_version: str = Field(default="0.5.6", description="Firmware version (major.minor.revision)")

    @field_validator("firmware_version")
    @classmethod
    def validate_firmware_version(cls, v):
        """Validate firmware version format."""
        parts = v.split(".")
        if len(parts) != 3 or not all(p.isdigit() for p in parts):
            raise ValueError("Firmware version must be major.minor.revision (e.g., '0.5.6')")
        return v


class AppConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")  # Raise error on unknown fields

    serial: SerialConfig = Field(default_factory=SerialConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    simulator: SimulatorConfig = Field(default_factory=SimulatorConfig)
