"""Tests for the command line entry point (simulator mode)."""

import argparse
import logging

import pytest

from odrive_ascii.__main__ import build_parser, main, parse_state, run_command
from odrive_ascii.client.odrive_client import ODriveClient
from odrive_ascii.config.models import SimulatorConfig
from odrive_ascii.protocol.logger import ProtocolLogger
from odrive_ascii.simulator.mock_serial import MockODriveSerial
from odrive_ascii.protocol.enums import AxisState


@pytest.fixture(autouse=True)
def restore_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "config.json")


def test_state(config_path, capsys):
    assert main(["--config", config_path, "--simulator", "state", "0"]) == 0
    assert capsys.readouterr().out.strip() == "IDLE (1)"


def test_feedback(config_path, capsys):
    assert main(["--config", config_path, "--simulator", "feedback", "1"]) == 0
    assert capsys.readouterr().out.strip() == "pos=0.0 vel=0.0"


def test_get_as_float(config_path, capsys):
    assert main(["--config", config_path, "--simulator", "get", "vbus_voltage", "--as", "float"]) == 0
    assert capsys.readouterr().out.strip() == "24.0"


def test_get_invalid_property_as_int_fails(config_path):
    assert main(["--config", config_path, "--simulator", "get", "nope", "--as", "int"]) == 1


def test_write_only_commands_print_nothing(config_path, capsys):
    assert main(["--config", config_path, "--simulator", "clear-errors"]) == 0
    assert main(["--config", config_path, "--simulator", "position", "0", "1.5", "--vel-ff", "0.5"]) == 0
    assert main(["--config", config_path, "--simulator", "set-state", "0", "closed_loop_control"]) == 0
    assert capsys.readouterr().out == ""


def test_bad_config_exits_with_error(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[")
    assert main(["--config", str(path), "--simulator", "state", "0"]) == 1


def test_missing_port_exits_with_error(tmp_path):
    path = tmp_path / "config.json"
    path.write_text('{"serial": {"port": "/dev/does-not-exist-odrive"}}')
    assert main(["--config", str(path), "state", "0"]) == 1


def test_parse_state():
    assert parse_state("8") is AxisState.CLOSED_LOOP_CONTROL
    assert parse_state("idle") is AxisState.IDLE
    with pytest.raises(argparse.ArgumentTypeError):
        parse_state("flying")


def test_get_string_drops_carriage_return(config_path, capsys):
    assert main(["--config", config_path, "--simulator", "get", "vbus_voltage"]) == 0
    assert capsys.readouterr().out == "24.0\n"


def test_position_command_order():
    simulator = MockODriveSerial(SimulatorConfig())
    client = ODriveClient(simulator, protocol_logger=ProtocolLogger())
    args = build_parser().parse_args(["position", "1", "2.5", "--vel-ff", "0.5"])

    assert run_command(client, args) == ""
    assert simulator.received_lines == ["p 1 2.5 0.5 0"]


def test_verbose_enables_debug(config_path):
    assert main(["--config", config_path, "--simulator", "--verbose", "state", "0"]) == 0
    assert logging.getLogger().level == logging.DEBUG
