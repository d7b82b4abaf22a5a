"""Configuration and command-line argument parsing for sercat."""

import argparse
import enum
from dataclasses import dataclass
from typing import Optional

from sercat.errors import UsageError


EXIT_STATUS_HELP = """\
exit status:
  0    end of stream reached (or --help shown)
  1    invalid or contradictory options
  255  the device could not be opened or configured, or an I/O error
"""


class FlowControl(enum.Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"
    UNSPECIFIED = "unspecified"


@dataclass(frozen=True)
class DeviceConfig:
    """Line settings requested for the device; `speed` None leaves the current rate."""

    flow: FlowControl = FlowControl.UNSPECIFIED
    speed: Optional[int] = None


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(message)


def _speed(text: str) -> int:
    try:
        value = int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid speed {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"speed must not be negative: {text}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="sercat",
        description="Relay bytes between a serial device and stdin/stdout for testing.",
        epilog=EXIT_STATUS_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    flow = parser.add_mutually_exclusive_group()
    flow.add_argument(
        "-f",
        "--hwflow",
        action="store_true",
        help="Enable hardware flow control (RTS/CTS)",
    )
    flow.add_argument(
        "-n",
        "--noflow",
        action="store_true",
        help="Disable hardware flow control",
    )
    direction = parser.add_mutually_exclusive_group()
    direction.add_argument(
        "-r",
        "--read",
        action="store_true",
        help="Read mode: copy the device to stdout (default)",
    )
    direction.add_argument(
        "-w",
        "--write",
        action="store_true",
        help="Write mode: copy stdin to the device",
    )
    parser.add_argument(
        "-s",
        "--speed",
        type=_speed,
        default=0,
        help="Serial speed in bps (default: leave unchanged)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose mode",
    )
    parser.add_argument("device", help="Serial device (or plain file) to open")
    return parser


def parse_args(argv=None):
    """Parse command-line arguments and return a validated namespace.

    Raises UsageError for anything argparse rejects or `_validate` refuses.
    """
    args = build_parser().parse_args(argv)
    _validate(args)
    return args


def _validate(args):
    """Validate parsed arguments; raise UsageError on invalid values."""
    if not (args.device and args.device.strip()):
        raise UsageError("device path must be non-empty")
    # argparse groups already reject these; kept for namespaces built by hand
    if args.hwflow and args.noflow:
        raise UsageError("--hwflow and --noflow are mutually exclusive")
    if args.read and args.write:
        raise UsageError("--read and --write are mutually exclusive")


def device_config(args) -> DeviceConfig:
    """Build the DeviceConfig that the parsed options ask for."""
    if args.hwflow:
        flow = FlowControl.ENABLED
    elif args.noflow:
        flow = FlowControl.DISABLED
    else:
        flow = FlowControl.UNSPECIFIED
    return DeviceConfig(flow=flow, speed=args.speed or None)
