"""Open a device and put it into raw mode with the requested flow control and speed."""

import enum
import errno
import io
import logging
import os
import termios
from typing import List, Optional

from sercat.config import DeviceConfig, FlowControl
from sercat.errors import DeviceConfigError, DeviceOpenError, UnsupportedSpeedError
from sercat.speeds import supported_speeds, symbol_of, value_of

logger = logging.getLogger(__name__)

# termios.tcgetattr list layout
IFLAG, OFLAG, CFLAG, LFLAG, ISPEED, OSPEED, CC = range(7)

# pyserial probes the same two names for the RTS/CTS bit
CRTSCTS = getattr(termios, "CRTSCTS", None) or getattr(termios, "CNEW_RTSCTS", 0)


class OpenMode(enum.Enum):
    READ = (os.O_RDONLY, "for reading", "rb")
    WRITE = (os.O_WRONLY, "for writing", "wb")

    def __init__(self, flags, description, file_mode):
        self.flags = flags
        self.description = description
        self.file_mode = file_mode


def _reason(exc) -> str:
    """Human-readable cause of an OSError or termios.error."""
    if isinstance(exc, OSError):
        return exc.strerror or str(exc)
    if len(exc.args) >= 2:
        return str(exc.args[1])
    return str(exc)


def _set_attributes(fd: int, attrs: List, operation: str):
    try:
        termios.tcsetattr(fd, termios.TCSANOW, attrs)
    except termios.error as e:
        raise DeviceConfigError(operation, _reason(e)) from e


def get_attributes(fd: int) -> Optional[List]:
    """Return the terminal attributes of `fd`, or None when it is not a tty.

    Any other failure raises DeviceConfigError.
    """
    try:
        return termios.tcgetattr(fd)
    except termios.error as e:
        if e.args and e.args[0] == errno.ENOTTY:
            return None
        raise DeviceConfigError("get terminal attributes", _reason(e)) from e


def make_raw(attrs: List) -> List:
    """Return a copy of `attrs` in raw mode: no translation, editing or signals, 8N1."""
    raw = list(attrs)
    raw[IFLAG] &= ~(
        termios.IGNBRK | termios.BRKINT | termios.PARMRK | termios.ISTRIP
        | termios.INLCR | termios.IGNCR | termios.ICRNL | termios.IXON | termios.IXOFF
    )
    raw[OFLAG] &= ~termios.OPOST
    raw[LFLAG] &= ~(
        termios.ECHO | termios.ECHONL | termios.ICANON | termios.ISIG | termios.IEXTEN
    )
    raw[CFLAG] &= ~(termios.CSIZE | termios.PARENB)
    raw[CFLAG] |= termios.CS8
    cc = list(raw[CC])
    cc[termios.VMIN] = 1
    cc[termios.VTIME] = 0
    raw[CC] = cc
    return raw


def set_flow_control(attrs: List, enabled: bool) -> List:
    """Return a copy of `attrs` with the RTS/CTS bit set or cleared."""
    if not CRTSCTS:
        raise DeviceConfigError(
            f"{'en' if enabled else 'dis'}able hardware flow control",
            "RTS/CTS is not supported on this platform",
        )
    attrs = list(attrs)
    if enabled:
        attrs[CFLAG] |= CRTSCTS
    else:
        attrs[CFLAG] &= ~CRTSCTS
    return attrs


def configure_tty(fd: int, attrs: List, config: DeviceConfig):
    """Apply raw mode, flow control and speed to an open tty, then flush it."""
    logger.debug("termios.c_iflag = 0%o", attrs[IFLAG])
    logger.debug("termios.c_oflag = 0%o", attrs[OFLAG])
    logger.debug("termios.c_cflag = 0%o", attrs[CFLAG])
    logger.debug("termios.c_lflag = 0%o", attrs[LFLAG])

    logger.debug("Enable terminal raw mode")
    attrs = make_raw(attrs)
    _set_attributes(fd, attrs, "enable raw mode")

    if config.flow is not FlowControl.UNSPECIFIED:
        enabled = config.flow is FlowControl.ENABLED
        logger.debug("%sabling hardware flow control", "En" if enabled else "Dis")
        attrs = set_flow_control(attrs, enabled)
        _set_attributes(
            fd, attrs, f"{'en' if enabled else 'dis'}able hardware flow control"
        )

    if config.speed is not None:
        sym = symbol_of(config.speed)
        if sym is None:
            raise UnsupportedSpeedError(config.speed, supported_speeds())
        logger.debug("Setting serial speed to %s bps", config.speed)
        attrs[ISPEED] = sym
        attrs[OSPEED] = sym
        _set_attributes(fd, attrs, "set speed attribute")
    else:
        logger.debug(
            "Serial speed is %s/%s", value_of(attrs[ISPEED]), value_of(attrs[OSPEED])
        )

    logger.debug("Flushing terminal")
    try:
        termios.tcflush(fd, termios.TCIOFLUSH)
    except termios.error as e:
        raise DeviceConfigError("flush", _reason(e)) from e


def open_and_configure(path: str, mode: OpenMode, config: DeviceConfig) -> io.FileIO:
    """Open `path` in `mode` and configure it as a raw serial line.

    Plain files (anything reporting "not a tty") are returned unconfigured.
    The returned endpoint owns the descriptor; on failure it is closed before
    the error propagates.
    """
    logger.debug("Opening %s...", path)
    try:
        fd = os.open(path, mode.flags)
    except OSError as e:
        raise DeviceOpenError(path, mode, _reason(e)) from e

    try:
        attrs = get_attributes(fd)
        if attrs is None:
            logger.info("%s is not a tty, skipping tty config", path)
        else:
            configure_tty(fd, attrs, config)
        try:
            return io.FileIO(fd, mode.file_mode, closefd=True)
        except OSError as e:
            # e.g. a directory: opens and reports ENOTTY, but is not a stream
            raise DeviceOpenError(path, mode, _reason(e)) from e
    except BaseException:
        os.close(fd)
        raise
