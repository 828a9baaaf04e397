"""Multimeter capability interface."""

# pylint: disable=unnecessary-ellipsis  # Ellipsis required for Protocol method stubs

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hdslab_core.types.instrument import MeasurementMode


@runtime_checkable
class Multimeter(Protocol):
    """Protocol for the digital multimeter role of an instrument.

    Example:
        meter = instrument.meter
        meter.set_mode(MeasurementMode.DC_VOLTAGE)
        meter.set_range("20")
        volts = meter.read_value()
    """

    def get_measurement_types(self) -> frozenset[MeasurementMode]:
        """Return the measurement modes the instrument can select."""
        ...

    def get_mode(self) -> MeasurementMode:
        """Return the active measurement mode."""
        ...

    def set_mode(self, mode: MeasurementMode) -> bool:
        """Select a measurement mode.

        Args:
            mode: The mode to select.

        Returns:
            True if the mode was selected, False if it is not supported.
        """
        ...

    def get_ranges(self, mode: MeasurementMode) -> tuple[str, ...]:
        """Return the selectable range labels for a mode."""
        ...

    def get_range(self) -> str:
        """Return the label of the active range."""
        ...

    def set_range(self, label: str) -> bool:
        """Select a range by label.

        Returns:
            True if the range was selected.
        """
        ...

    def get_auto_range(self) -> bool:
        """Return True if auto-ranging is active."""
        ...

    def set_auto_range(self, enable: bool) -> None:
        """Enable or disable auto-ranging."""
        ...

    def read_value(self) -> float:
        """Return the current reading in the active mode's base unit."""
        ...

    def get_digits(self) -> int:
        """Return the number of display digits."""
        ...
