"""Serial read/write test tool: relay bytes between a raw-mode serial device and stdin/stdout."""

from sercat.config import DeviceConfig, FlowControl
from sercat.device import OpenMode, open_and_configure
from sercat.relay import relay, run_sercat

__all__ = [
    "DeviceConfig",
    "FlowControl",
    "OpenMode",
    "open_and_configure",
    "relay",
    "run_sercat",
]
