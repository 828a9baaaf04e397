"""Multimeter range selection by blind cycling.

The HDS200 cannot be told "use the 20 V range". It can only:

- switch the coarse input relay (``:DMM:RANGE V|mV|A|mA``),
- enable auto-range (``:DMM:AUTO ON``),
- advance to the next range (``:DMM:RANGE ON``), and
- report the active range (``:DMM:RANGE?``).

Selecting a fine range therefore means advancing one step at a time and
reading back until the reported range matches, bounded by a retry ceiling.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

from hdslab_core.types.instrument import MeasurementMode
from hdslab_scpi import ScpiConnection

from hdslab_owon.config import SettleTimes
from hdslab_owon.mode import ModeResolver

logger = logging.getLogger(__name__)

AUTO = "AUTO"
NO_RANGE = "##none##"
"""Sole range label for modes without a selectable range."""

RANGE_TABLE: Mapping[MeasurementMode, tuple[str, ...]] = MappingProxyType(
    {
        MeasurementMode.DC_VOLTAGE: (AUTO, "200m", "2", "20", "200", "1000"),
        MeasurementMode.AC_VOLTAGE: (AUTO, "200m", "2", "20", "200", "750"),
        MeasurementMode.DC_CURRENT: ("200m", "10"),
        MeasurementMode.AC_CURRENT: ("200m", "10"),
        MeasurementMode.RESISTANCE: (AUTO, "200", "2k", "20k", "200k", "2M", "20M", "100M"),
    }
)


_KNOWN_LABELS = frozenset(label for labels in RANGE_TABLE.values() for label in labels) | {NO_RANGE}


def ranges_for(mode: MeasurementMode) -> tuple[str, ...]:
    """Return the range labels for *mode*; never empty."""
    return RANGE_TABLE.get(mode, (NO_RANGE,))


class RangeController:
    """Selects meter ranges on the active measurement mode.

    Args:
        conn: Connection to the instrument.
        modes: Resolver supplying the active measurement mode.
        settle: Settle delays for relay, auto-range and cycle commands.
        max_cycles: Maximum number of cycle commands per selection.
    """

    def __init__(
        self,
        conn: ScpiConnection,
        modes: ModeResolver,
        *,
        settle: SettleTimes | None = None,
        max_cycles: int = 20,
    ) -> None:
        self._conn = conn
        self._modes = modes
        self._settle = settle or SettleTimes()
        self._max_cycles = max_cycles
        self._auto = False

    @property
    def max_cycles(self) -> int:
        return self._max_cycles

    def get_ranges(self, mode: MeasurementMode | None = None) -> tuple[str, ...]:
        """Return the range labels for *mode*, or for the active mode if None."""
        if mode is None:
            mode = self._modes.get_mode()
        return ranges_for(mode)

    def get_range(self) -> str:
        """Return the active range label, e.g. ``"20"`` for a ``"20V"`` reply."""
        reply = self._conn.query(":DMM:RANGE?")
        return reply[:-1]

    def get_auto_range(self) -> bool:
        """Return True if AUTO was the last range selected through this controller.

        The device cannot report auto-range state, so this reflects what was
        requested, not what the device confirms.
        """
        return self._auto

    def set_auto_range(self, enable: bool) -> None:
        """Enable auto-range. Disabling is done by selecting a manual range."""
        if enable:
            self.set_range(AUTO)
        else:
            logger.debug("Auto-range is left by selecting a manual range; ignoring disable")

    def clear_auto(self) -> None:
        """Forget a previous AUTO selection (the device drops it on mode change)."""
        self._auto = False

    def set_range(self, label: str) -> bool:
        """Select the range *label* on the active mode.

        Args:
            label: One of :meth:`get_ranges` for the active mode.

        Returns:
            True on success. False if *label* is not valid for the active
            mode (nothing is sent) or cycling did not reach it.
        """
        if label not in _KNOWN_LABELS:
            logger.error("Unknown range %r", label)
            return False
        mode = self._modes.get_mode()
        if label not in ranges_for(mode):
            logger.error("Unknown range %r for mode %s", label, mode.name)
            return False

        if label == AUTO:
            # Auto-range is unavailable on the 200 mV relay position
            if mode.is_voltage:
                self._conn.command(":DMM:RANGE V", settle=self._settle.relay)
            self._conn.command(":DMM:AUTO ON", settle=self._settle.auto_range)
            self._auto = True
            return True

        self._auto = False
        if mode.is_voltage:
            if label == "200m":
                self._conn.command(":DMM:RANGE mV", settle=self._settle.relay)
                return True
            self._conn.command(":DMM:RANGE V", settle=self._settle.relay)
            return self.cycle_until(label)
        if mode.is_current:
            relay = "mA" if label == "200m" else "A"
            self._conn.command(f":DMM:RANGE {relay}", settle=self._settle.relay)
            return True
        if mode is MeasurementMode.RESISTANCE:
            return self.cycle_until(label)
        # No manual range on the remaining modes
        return True

    def cycle_until(self, label: str) -> bool:
        """Advance the range until the device reports *label*.

        Returns:
            True once the reported range matches. False after
            ``max_cycles`` cycle commands without a match; the device stays
            on whatever range the last cycle selected.
        """
        for attempt in range(self._max_cycles + 1):
            current = self.get_range()
            if current == label:
                logger.debug("Range %s reached after %d cycle(s)", label, attempt)
                return True
            if attempt == self._max_cycles:
                break
            self._conn.command(":DMM:RANGE ON", settle=self._settle.range_cycle)
        logger.warning(
            "Range %s not reached after %d cycles (device reports %r)",
            label,
            self._max_cycles,
            current,
        )
        return False
