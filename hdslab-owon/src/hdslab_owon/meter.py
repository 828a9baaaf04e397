"""HDS200 digital multimeter facet."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hdslab_core.types.instrument import MeasurementMode

from hdslab_owon.mode import SUPPORTED_MODES

if TYPE_CHECKING:
    from hdslab_owon.state import Hds200State

METER_DIGITS = 6
METER_CHANNEL = 0


class Hds200Meter:
    """Multimeter role of the HDS200.

    Mode and range handling are delegated to the shared
    :class:`~hdslab_owon.mode.ModeResolver` and
    :class:`~hdslab_owon.ranges.RangeController`.

    Args:
        state: Shared device state.
    """

    def __init__(self, state: Hds200State) -> None:
        self._state = state

    def get_measurement_types(self) -> frozenset[MeasurementMode]:
        return SUPPORTED_MODES

    def get_mode(self) -> MeasurementMode:
        return self._state.modes.get_mode()

    @property
    def mode_resolved(self) -> bool:
        """False if the reported mode is an unconfirmed fallback."""
        return self._state.modes.mode_resolved

    def set_mode(self, mode: MeasurementMode) -> bool:
        """Select a measurement mode; the device drops auto-range on change."""
        if not self._state.modes.set_mode(mode):
            return False
        self._state.ranges.clear_auto()
        return True

    def get_ranges(self, mode: MeasurementMode) -> tuple[str, ...]:
        return self._state.ranges.get_ranges(mode)

    def get_range(self) -> str:
        return self._state.ranges.get_range()

    def set_range(self, label: str) -> bool:
        return self._state.ranges.set_range(label)

    def get_auto_range(self) -> bool:
        return self._state.ranges.get_auto_range()

    def set_auto_range(self, enable: bool) -> None:
        self._state.ranges.set_auto_range(enable)

    def read_value(self) -> float:
        """Read the display value (``:DMM:MEAS?``)."""
        return self._state.conn.query_value(":DMM:MEAS?")

    def get_digits(self) -> int:
        return METER_DIGITS

    def get_current_channel(self) -> int:
        """The meter has a single input channel."""
        return METER_CHANNEL

    def start(self) -> None:
        """The meter measures continuously; nothing to start."""

    def stop(self) -> None:
        """The meter measures continuously; nothing to stop."""
