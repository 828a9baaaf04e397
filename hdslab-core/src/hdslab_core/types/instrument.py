"""Enumerations describing instrument roles and settings.

Classes:
    InstrumentType: Bit flags naming the roles an instrument or channel plays.
    MeasurementMode: Multimeter measurement functions.
    CouplingType: Oscilloscope input coupling.
    TriggerMode: Oscilloscope trigger status reported to the host.
    WaveShape: Function generator output shapes.
"""

from __future__ import annotations

from enum import Enum, Flag


class InstrumentType(Flag):
    """Roles an instrument (or one of its channels) can play."""

    NONE = 0
    DMM = 1
    OSCILLOSCOPE = 2
    FUNCTION = 4


class MeasurementMode(Enum):
    """Multimeter measurement functions.

    Not every driver supports every mode; drivers report the subset they
    can select.
    """

    DC_VOLTAGE = "dc_voltage"
    AC_VOLTAGE = "ac_voltage"
    DC_CURRENT = "dc_current"
    AC_CURRENT = "ac_current"
    RESISTANCE = "resistance"
    CAPACITANCE = "capacitance"
    CONTINUITY = "continuity"
    DIODE = "diode"
    FREQUENCY = "frequency"
    TEMPERATURE = "temperature"

    @property
    def is_voltage(self) -> bool:
        """True for the AC and DC voltage modes."""
        return self in (MeasurementMode.DC_VOLTAGE, MeasurementMode.AC_VOLTAGE)

    @property
    def is_current(self) -> bool:
        """True for the AC and DC current modes."""
        return self in (MeasurementMode.DC_CURRENT, MeasurementMode.AC_CURRENT)


class CouplingType(Enum):
    """Oscilloscope channel input coupling."""

    DC_1M = "dc_1m"
    AC_1M = "ac_1m"
    GND = "gnd"


class TriggerMode(Enum):
    """Trigger status as seen by the acquisition host."""

    TRIGGERED = "triggered"
    STOP = "stop"


class WaveShape(Enum):
    """Function generator output shapes."""

    SINE = "sine"
    SQUARE = "square"
    TRIANGLE = "triangle"
    PULSE = "pulse"
    STAIRCASE_DOWN = "staircase_down"
    STAIRCASE_UP = "staircase_up"
    STAIRCASE_UP_DOWN = "staircase_up_down"
    SINC = "sinc"
    NOISE = "noise"
    DC = "dc"
