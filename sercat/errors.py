"""Exceptions raised while opening, configuring and relaying through a device."""

from typing import Optional

import serial


class SercatError(serial.SerialException):
    """Base class for every fatal condition; carries a printable message and optional hint."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint


class DeviceOpenError(SercatError):
    def __init__(self, path: str, mode, reason: str, hint: Optional[str] = None):
        self.path = path
        self.mode = mode
        self.reason = reason
        super().__init__(f"Failed to open {path} {mode.description}: {reason}", hint)


class DeviceConfigError(SercatError):
    """A terminal attribute could not be read, applied or flushed."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Failed to {operation}: {reason}")


class UnsupportedSpeedError(SercatError):
    def __init__(self, speed: int, supported=()):
        self.speed = speed
        hint = None
        if supported:
            hint = "Supported speeds: " + ", ".join(str(s) for s in supported)
        super().__init__(f"Unknown serial speed {speed}", hint)


class RelayError(SercatError):
    pass


class RelayReadError(RelayError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Read error: {reason}")


class RelayWriteError(RelayError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Write error: {reason}")


class ShortWriteError(RelayError):
    """The sink accepted fewer bytes than it was given."""

    def __init__(self, requested: int, actual: int):
        self.requested = requested
        self.actual = actual
        super().__init__(f"Short write {actual} < {requested}")


class UsageError(ValueError):
    """Malformed or contradictory command-line options."""
