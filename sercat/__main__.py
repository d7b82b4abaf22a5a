"""Entry point: parse options, run the relay and map the outcome to an exit status."""

import logging
import sys

from serial.tools import list_ports

from sercat.config import build_parser, device_config, parse_args
from sercat.device import OpenMode
from sercat.errors import DeviceOpenError, SercatError, UsageError
from sercat.logging_config import setup_logging
from sercat.relay import run_sercat

logger = logging.getLogger("sercat")

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FAILURE = 255
EXIT_INTERRUPTED = 130


def _port_hint() -> str:
    """List the serial ports pyserial can see, for an open failure."""
    ports = list(list_ports.comports())
    listing = "\n".join(
        f"- {p.device} {(p.description or '')}".strip() for p in ports
    ) or "(no serial ports found)"
    return "Available serial ports:\n" + listing


def main(argv=None) -> int:
    try:
        args = parse_args(argv)
    except UsageError as e:
        parser = build_parser()
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(args.verbose)
    mode = OpenMode.WRITE if args.write else OpenMode.READ
    try:
        run_sercat(args.device, mode, device_config(args))
    except DeviceOpenError as e:
        logger.error("%s", e.message)
        logger.info("%s", e.hint or _port_hint())
        return EXIT_FAILURE
    except SercatError as e:
        logger.error("%s", e.message)
        if e.hint:
            logger.info("%s", e.hint)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
