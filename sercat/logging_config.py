"""Console logging setup: everything to stderr, warnings and errors colored on a terminal."""

import logging
import sys

RESET = "\033[0m"
YELLOW = "\033[33m"
RED = "\033[31m"

LEVEL_COLORS = {
    logging.WARNING: YELLOW,
    logging.ERROR: RED,
    logging.CRITICAL: RED,
}


class ColorFormatter(logging.Formatter):
    def __init__(self, fmt=None, datefmt=None, use_color=True):
        super().__init__(fmt, datefmt)
        self.use_color = use_color

    def format(self, record):
        text = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if self.use_color and color:
            return f"{color}{text}{RESET}"
        return text


def setup_logging(verbose: bool = False, stream=None):
    """Install a single stderr handler on the root logger.

    stdout is left alone: in read mode it carries the relayed bytes.
    """
    if stream is None:
        stream = sys.stderr
    handler = logging.StreamHandler(stream)
    use_color = hasattr(stream, "isatty") and stream.isatty()
    if verbose:
        fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    else:
        fmt = "%(message)s"
    handler.setFormatter(ColorFormatter(fmt, datefmt="%Y-%m-%d %H:%M:%S", use_color=use_color))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        handlers=[handler],
        force=True,
    )
