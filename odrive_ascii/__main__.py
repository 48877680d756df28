"""
Command line entry point for the ODrive ASCII client.

Usage:
    python -m odrive_ascii [--config CONFIG_PATH] [--simulator] [--verbose] COMMAND ...

Examples:
    python -m odrive_ascii state 0
    python -m odrive_ascii set-state 0 CLOSED_LOOP_CONTROL
    python -m odrive_ascii position 0 3.14 --vel-ff 0.5
    python -m odrive_ascii get vbus_voltage --as float
"""

import argparse
import logging
import sys

from odrive_ascii.config.loader import load_config, ConfigurationError
from odrive_ascii.config.models import AppConfig
from odrive_ascii.utils.logging_setup import setup_logging
from odrive_ascii.utils.exceptions import DriverError, ODriveException
from odrive_ascii.client.odrive_client import ODriveClient
from odrive_ascii.protocol.enums import AxisState
from odrive_ascii.protocol.odrive_serial import ODriveSerial
from odrive_ascii.simulator.mock_serial import MockODriveSerial


logger = logging.getLogger(__name__)


def parse_state(text: str) -> AxisState:
    """Accept a state name (case-insensitive) or its integer code."""
    try:
        return AxisState(int(text))
    except ValueError:
        pass
    try:
        return AxisState[text.upper()]
    except KeyError:
        raise argparse.ArgumentTypeError(f"Unknown axis state: {text}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="odrive_ascii",
        description="ODrive ASCII protocol client"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config.json",
        help="Path to configuration file (default: config.json)"
    )
    parser.add_argument(
        "--simulator",
        action="store_true",
        help="Talk to the built-in simulator instead of a serial port"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every command and response line (DEBUG)"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("clear-errors", help="Clear controller errors")

    p = sub.add_parser("position", help="Send a position setpoint")
    p.add_argument("axis", type=int)
    p.add_argument("position", type=float)
    p.add_argument("--vel-ff", type=float, default=0.0, help="Velocity feedforward [rad/s]")
    p.add_argument("--torque-ff", type=float, default=0.0, help="Torque feedforward")

    p = sub.add_parser("feedback", help="Read position and velocity estimates")
    p.add_argument("axis", type=int)

    p = sub.add_parser("get", help="Read a parameter")
    p.add_argument("path")
    p.add_argument("--as", dest="as_type", choices=["str", "int", "float"], default="str")

    p = sub.add_parser("set", help="Write a parameter")
    p.add_argument("path")
    p.add_argument("value")

    p = sub.add_parser("state", help="Read the current axis state")
    p.add_argument("axis", type=int)

    p = sub.add_parser("set-state", help="Request an axis state")
    p.add_argument("axis", type=int)
    p.add_argument("state", type=parse_state)

    return parser


def run_command(client: ODriveClient, args: argparse.Namespace) -> str:
    """
    Execute one parsed command.

    Returns:
        Text to print, empty for write-only commands.
    """
    if args.command == "clear-errors":
        client.clear_errors()
    elif args.command == "position":
        client.set_position(args.position, args.vel_ff, args.torque_ff, args.axis)
    elif args.command == "feedback":
        feedback = client.get_feedback(args.axis)
        return f"pos={feedback.pos} vel={feedback.vel}"
    elif args.command == "get":
        if args.as_type == "int":
            return str(client.get_parameter_as_int(args.path))
        elif args.as_type == "float":
            return str(client.get_parameter_as_float(args.path))
        # Controller lines end in \r, keep it off the terminal
        return client.get_parameter_as_string(args.path).rstrip("\r")
    elif args.command == "set":
        client.set_parameter(args.path, args.value)
    elif args.command == "state":
        state = client.get_state(args.axis)
        return f"{state.name} ({int(state)})"
    elif args.command == "set-state":
        client.set_state(args.state, args.axis)
    return ""


def main(argv=None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging, "DEBUG" if args.verbose else None)

    if args.simulator or config.simulator.enabled:
        logger.info("Using SIMULATOR mode")
        return _run(MockODriveSerial(config.simulator), config, args)

    transport = ODriveSerial(config.serial)
    try:
        transport.connect()
    except DriverError as e:
        logger.error(str(e))
        return 1

    try:
        return _run(transport, config, args)
    finally:
        transport.disconnect()


def _run(transport, config: AppConfig, args: argparse.Namespace) -> int:
    client = ODriveClient(transport, config.client)
    try:
        output = run_command(client, args)
    except ODriveException as e:
        logger.error(f"{args.command} failed: {e}")
        return 1

    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
