"""Tests for configuration models and the JSON loader."""

import json

import pytest
from pydantic import ValidationError

from odrive_ascii.config.loader import ConfigurationError, load_config, save_config
from odrive_ascii.config.models import AppConfig, ClientConfig, LoggingConfig, SimulatorConfig


def test_defaults():
    config = AppConfig()
    assert config.serial.baud == 115200
    assert config.client.read_buffer_size == 256
    assert config.client.line_timeout_seconds is None
    assert config.logging.level == "INFO"


def test_log_level_is_normalized():
    assert LoggingConfig(level="debug").level == "DEBUG"


def test_invalid_log_level():
    with pytest.raises(ValidationError):
        LoggingConfig(level="LOUD")


def test_line_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        ClientConfig(line_timeout_seconds=0)


def test_firmware_version_format():
    with pytest.raises(ValidationError):
        SimulatorConfig(firmware_version="056")


def test_unknown_section_rejected():
    with pytest.raises(ValidationError):
        AppConfig(motor={})


def test_missing_file_creates_default(tmp_path):
    path = tmp_path / "config.json"
    config = load_config(str(path))

    assert config == AppConfig()
    assert path.exists()
    assert json.loads(path.read_text())["serial"]["baud"] == 115200


def test_load_values(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "serial": {"port": "COM7", "baud": 921600},
        "client": {"line_timeout_seconds": 0.5},
    }))

    config = load_config(str(path))
    assert config.serial.port == "COM7"
    assert config.serial.baud == 921600
    assert config.client.line_timeout_seconds == 0.5


def test_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_validation_error_lists_field(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"serial": {"baud": 0}}))

    with pytest.raises(ConfigurationError) as exc_info:
        load_config(str(path))
    assert "serial -> baud" in str(exc_info.value)


def test_save_and_reload(tmp_path):
    path = tmp_path / "config.json"
    config = AppConfig()
    config.simulator.enabled = True

    save_config(config, str(path))
    assert load_config(str(path)).simulator.enabled is True


def test_missing_directory_falls_back_to_defaults(tmp_path):
    """Defaults are still returned when they cannot be written."""
    path = tmp_path / "missing" / "config.json"
    assert load_config(str(path)) == AppConfig()
    assert not path.exists()
