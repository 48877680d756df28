"""
Load and save the ODrive client settings (config.json).
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .models import AppConfig


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config.json"


class ConfigurationError(Exception):
    """Raised when config.json is invalid or cannot be read or written."""
    pass


def _describe_validation_error(error: ValidationError) -> str:
    """One line per rejected setting, e.g. "  - serial -> baud: ..."."""
    lines = []
    for item in error.errors():
        field = " -> ".join(str(x) for x in item["loc"])
        lines.append(f"  - {field}: {item['msg']}")
    return "Invalid ODrive client settings:\n" + "\n".join(lines)


def load_config(path: Optional[str] = None) -> AppConfig:
    """
    Load serial, client, logging and simulator settings.

    A missing file is not an error: defaults are used and written to path
    so they can be edited (serial.port, client.line_timeout_seconds, ...).

    Args:
        path: JSON file, config.json in the working directory by default.

    Returns:
        Validated AppConfig.

    Raises:
        ConfigurationError: If the file is unreadable, not JSON, or holds
            settings the models reject.
    """
    config_path = Path(path or DEFAULT_CONFIG_PATH)

    if not config_path.exists():
        logger.info(f"No settings at {config_path}, writing defaults (port {AppConfig().serial.port})")
        config = AppConfig()
        try:
            save_config(config, str(config_path))
        except ConfigurationError as e:
            logger.warning(str(e))
        return config

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{config_path} is not valid JSON: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}") from e

    try:
        config = AppConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(_describe_validation_error(e)) from e

    logger.debug(
        f"Settings from {config_path}: port={config.serial.port} baud={config.serial.baud} "
        f"line_timeout={config.client.line_timeout_seconds}"
    )
    return config


def save_config(config: AppConfig, path: Optional[str] = None) -> None:
    """
    Write settings as indented JSON.

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    config_path = Path(path or DEFAULT_CONFIG_PATH)

    try:
        config_path.write_text(json.dumps(config.model_dump(), indent=2), encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot write {config_path}: {e}") from e

    logger.info(f"Settings saved to {config_path}")
