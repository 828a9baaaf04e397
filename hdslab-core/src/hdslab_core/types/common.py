"""Common types used across hdslab modules.

Type Aliases:
    ChannelId: Identifies an instrument channel (e.g., ``"CH1"``).

Classes:
    InstrumentIdentity: Instrument identification metadata.
    Timestamp: Wall-clock timestamp with nanosecond precision.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import NewType

ChannelId = NewType("ChannelId", str)
"""Type alias for instrument channel identifiers."""


@dataclass(frozen=True)
class InstrumentIdentity:
    """Instrument identification metadata.

    Represents the four standard fields returned by the SCPI ``*IDN?`` query.

    Attributes:
        manufacturer: Instrument manufacturer name (e.g., "OWON").
        model: Instrument model number or name (e.g., "HDS2102S").
        serial: Serial number string.
        firmware: Firmware or hardware version string.
    """

    manufacturer: str
    model: str
    serial: str
    firmware: str


@dataclass(frozen=True)
class Timestamp:
    """Wall-clock timestamp stored as nanoseconds since the Unix epoch.

    Attributes:
        unix_ns: Nanoseconds since Unix epoch.
    """

    unix_ns: int

    @classmethod
    def now(cls) -> Timestamp:
        """Create a timestamp for the current time."""
        return cls(unix_ns=time.time_ns())

    def to_datetime(self) -> datetime:
        """Convert to a timezone-aware datetime object in UTC."""
        return datetime.fromtimestamp(self.unix_ns / 1_000_000_000, tz=timezone.utc)

    @property
    def unix_seconds(self) -> float:
        """Return the timestamp as floating-point seconds since Unix epoch."""
        return self.unix_ns / 1_000_000_000

    def split(self) -> tuple[int, float]:
        """Split into whole seconds and the sub-second fraction.

        Returns:
            Tuple of (whole seconds since epoch, fraction of a second in [0, 1)).
        """
        seconds, remainder_ns = divmod(self.unix_ns, 1_000_000_000)
        return seconds, remainder_ns / 1_000_000_000
