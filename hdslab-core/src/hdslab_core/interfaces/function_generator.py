"""Function generator capability interface."""

# pylint: disable=unnecessary-ellipsis  # Ellipsis required for Protocol method stubs

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hdslab_core.types.instrument import WaveShape


@runtime_checkable
class FunctionGenerator(Protocol):
    """Protocol for the function/arbitrary waveform generator role.

    Channel arguments are generator output indices. Instruments with a
    single output accept and ignore them.
    """

    def get_channel_active(self, channel: int) -> bool:
        """Return True if the output is enabled."""
        ...

    def set_channel_active(self, channel: int, active: bool) -> None:
        """Enable or disable the output."""
        ...

    def get_amplitude(self, channel: int) -> float:
        """Return the amplitude in volts peak-to-peak."""
        ...

    def set_amplitude(self, channel: int, amplitude: float) -> None:
        """Set the amplitude in volts peak-to-peak."""
        ...

    def get_offset(self, channel: int) -> float:
        """Return the DC offset in volts."""
        ...

    def set_offset(self, channel: int, offset: float) -> None:
        """Set the DC offset in volts."""
        ...

    def get_frequency(self, channel: int) -> float:
        """Return the frequency in hertz."""
        ...

    def set_frequency(self, channel: int, frequency: float) -> None:
        """Set the frequency in hertz."""
        ...

    def get_duty_cycle(self, channel: int) -> float:
        """Return the duty cycle as a fraction in [0, 1]."""
        ...

    def set_duty_cycle(self, channel: int, duty: float) -> None:
        """Set the duty cycle as a fraction in [0, 1]."""
        ...

    def get_available_shapes(self, channel: int) -> tuple[WaveShape, ...]:
        """Return the shapes the output can produce."""
        ...

    def get_shape(self, channel: int) -> WaveShape:
        """Return the active output shape."""
        ...

    def set_shape(self, channel: int, shape: WaveShape) -> bool:
        """Select an output shape.

        Returns:
            True if the shape was selected, False if it is not supported.
        """
        ...
