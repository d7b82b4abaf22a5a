"""Blocking byte pump between the configured device and the process's stdin/stdout."""

import errno
import io
import logging
import os
import sys
from typing import Optional

from sercat.config import DeviceConfig
from sercat.device import OpenMode, open_and_configure
from sercat.errors import RelayReadError, RelayWriteError, ShortWriteError

logger = logging.getLogger(__name__)

BUF_SIZE = 1024


def relay(source, sink, chunk_size: int = BUF_SIZE) -> int:
    """Copy `source` to `sink` until end-of-stream; return the number of bytes moved.

    Each chunk is written exactly once. A write that takes fewer bytes than it
    was given raises ShortWriteError; the remainder is not retried.
    """
    total = 0
    while True:
        try:
            data = source.read(chunk_size)
        except OSError as e:
            raise RelayReadError(e.strerror or str(e)) from e
        # raw streams return None when a non-blocking read has nothing yet
        if data is None:
            raise RelayReadError(os.strerror(errno.EAGAIN))
        if not data:
            break

        try:
            written = sink.write(data)
        except OSError as e:
            raise RelayWriteError(e.strerror or str(e)) from e
        # raw streams return None when a non-blocking write would block
        if written is None:
            written = 0
        if written < len(data):
            raise ShortWriteError(len(data), written)
        total += written
    return total


def standard_stream(mode: OpenMode) -> io.FileIO:
    """Endpoint for the stdio side of a relay; it never closes the inherited descriptor."""
    if mode is OpenMode.WRITE:
        return io.FileIO(sys.stdin.fileno(), "rb", closefd=False)
    return io.FileIO(sys.stdout.fileno(), "wb", closefd=False)


def run_sercat(
    device: str,
    mode: OpenMode,
    config: DeviceConfig,
    stream: Optional[io.RawIOBase] = None,
) -> int:
    """Open and configure `device`, then relay in the direction `mode` selects.

    In read mode the device feeds `stream` (default stdout); in write mode
    `stream` (default stdin) feeds the device. Returns the number of bytes
    relayed. The device is closed on return; `stream` is not.
    """
    with open_and_configure(device, mode, config) as dev:
        if stream is None:
            stream = standard_stream(mode)
        if mode is OpenMode.WRITE:
            source, sink = stream, dev
        else:
            source, sink = dev, stream
        total = relay(source, sink)
    logger.debug("Relayed %d bytes, closed %s", total, device)
    return total
