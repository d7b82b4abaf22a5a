"""Mapping between native termios speed symbols and bits-per-second values."""

import termios
from typing import List, NamedTuple, NewType, Optional, Tuple

import serial

SpeedSymbol = NewType("SpeedSymbol", int)

# 0 is the hang-up entry; the rest are the rates pyserial knows as standard.
CANDIDATE_RATES = (0,) + tuple(serial.Serial.BAUDRATES)


class SpeedEntry(NamedTuple):
    symbol: SpeedSymbol
    value: int


def build_speed_table(namespace=termios) -> Tuple[SpeedEntry, ...]:
    """Build the table from the ``B<rate>`` constants `namespace` defines, in rate order.

    Rates the platform has no constant for are left out.
    """
    entries = []
    for rate in CANDIDATE_RATES:
        sym = getattr(namespace, f"B{rate}", None)
        if sym is None:
            continue
        entries.append(SpeedEntry(SpeedSymbol(sym), rate))
    return tuple(entries)


SPEEDS = build_speed_table()


def value_of(symbol: int, table: Tuple[SpeedEntry, ...] = SPEEDS) -> Optional[int]:
    """Return the bps value for a native speed symbol, or None if unknown."""
    for entry in table:
        if entry.symbol == symbol:
            return entry.value
    return None


def symbol_of(value: int, table: Tuple[SpeedEntry, ...] = SPEEDS) -> Optional[SpeedSymbol]:
    """Return the native speed symbol for a bps value, or None if unsupported."""
    for entry in table:
        if entry.value == value:
            return entry.symbol
    return None


def supported_speeds(table: Tuple[SpeedEntry, ...] = SPEEDS) -> List[int]:
    return [entry.value for entry in table]
