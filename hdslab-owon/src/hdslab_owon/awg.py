"""HDS200 arbitrary waveform generator facet.

The generator has no read-back commands. Settings are tracked locally and
written through to the device on every change. Only ``S`` models carry the
generator; the facet has a single output and ignores channel arguments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from hdslab_core.types.instrument import WaveShape
from hdslab_scpi import format_number, format_on_off

if TYPE_CHECKING:
    from hdslab_owon.state import Hds200State

logger = logging.getLogger(__name__)

SHAPE_COMMANDS: Mapping[WaveShape, str] = MappingProxyType(
    {
        WaveShape.SINE: "SINE",
        WaveShape.SQUARE: "SQU",
        WaveShape.TRIANGLE: "RAMP",
        WaveShape.PULSE: "PULS",
        WaveShape.STAIRCASE_DOWN: "StairDn",
        WaveShape.STAIRCASE_UP: "StairUp",
        WaveShape.STAIRCASE_UP_DOWN: "StairUD",
    }
)


@dataclass
class AwgSettings:
    """Last values written to the generator (power-on defaults initially)."""

    enabled: bool = False
    amplitude: float = 0.5
    offset: float = 0.0
    frequency: float = 1000.0
    duty_cycle: float = 0.5
    shape: WaveShape = WaveShape.SINE


class Hds200Awg:
    """Function generator role of the HDS200.

    Args:
        state: Shared device state.
    """

    def __init__(self, state: Hds200State) -> None:
        self._state = state

    @property
    def _settings(self) -> AwgSettings:
        return self._state.awg

    def get_channel_active(self, channel: int) -> bool:
        return self._settings.enabled

    def set_channel_active(self, channel: int, active: bool) -> None:
        self._settings.enabled = active
        self._state.conn.command(f":CHAN {format_on_off(active)}")

    def get_amplitude(self, channel: int) -> float:
        return self._settings.amplitude

    def set_amplitude(self, channel: int, amplitude: float) -> None:
        self._settings.amplitude = amplitude
        self._state.conn.command(f":FUNC:AMP {format_number(amplitude)}")

    def get_offset(self, channel: int) -> float:
        return self._settings.offset

    def set_offset(self, channel: int, offset: float) -> None:
        self._settings.offset = offset
        self._state.conn.command(f":FUNC:OFF {format_number(offset)}")

    def get_frequency(self, channel: int) -> float:
        return self._settings.frequency

    def set_frequency(self, channel: int, frequency: float) -> None:
        self._settings.frequency = frequency
        self._state.conn.command(f":FUNC:FREQ {format_number(frequency)}")

    def get_duty_cycle(self, channel: int) -> float:
        """Return the duty cycle; 0.0 unless the shape is PULSE."""
        if self._settings.shape is not WaveShape.PULSE:
            return 0.0
        return self._settings.duty_cycle

    def set_duty_cycle(self, channel: int, duty: float) -> None:
        """Record the duty cycle, sending it only while the shape is PULSE."""
        self._settings.duty_cycle = duty
        if self._settings.shape is WaveShape.PULSE:
            self._state.conn.command(f":FUNC:DTY {format_number(duty)}")

    def get_available_shapes(self, channel: int) -> tuple[WaveShape, ...]:
        return tuple(SHAPE_COMMANDS)

    def get_shape(self, channel: int) -> WaveShape:
        return self._settings.shape

    def set_shape(self, channel: int, shape: WaveShape) -> bool:
        """Select an output shape.

        Returns:
            False (and nothing sent) if the HDS200 cannot produce *shape*.
        """
        token = SHAPE_COMMANDS.get(shape)
        if token is None:
            logger.warning("Waveform shape %s is not supported by the HDS200", shape.name)
            return False
        self._settings.shape = shape
        self._state.conn.command(f":FUNC {token}")
        return True

    def has_rise_fall_controls(self, channel: int) -> bool:
        return False
