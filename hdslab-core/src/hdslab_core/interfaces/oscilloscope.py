"""Oscilloscope capability interface."""

# pylint: disable=unnecessary-ellipsis  # Ellipsis required for Protocol method stubs

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hdslab_core.types.instrument import CouplingType, TriggerMode
from hdslab_core.types.waveform import WaveformSet


@runtime_checkable
class Oscilloscope(Protocol):
    """Protocol for the oscilloscope role of an instrument.

    Channel arguments are the instrument's channel indices. The host polls
    :meth:`poll_trigger` and calls :meth:`acquire_data` while triggered,
    then collects results with :meth:`pop_waveforms`.

    Example:
        scope = instrument.scope
        scope.start_single_trigger()
        while scope.poll_trigger() is TriggerMode.TRIGGERED:
            scope.acquire_data()
        waveforms = scope.pop_waveforms()
    """

    # -- Channels --

    def is_channel_enabled(self, channel: int) -> bool:
        """Return True if the channel is displayed/acquired."""
        ...

    def enable_channel(self, channel: int) -> None:
        """Enable a channel."""
        ...

    def disable_channel(self, channel: int) -> None:
        """Disable a channel."""
        ...

    def get_available_couplings(self, channel: int) -> tuple[CouplingType, ...]:
        """Return the couplings the channel supports."""
        ...

    def get_channel_coupling(self, channel: int) -> CouplingType:
        """Return the channel's input coupling."""
        ...

    def set_channel_coupling(self, channel: int, coupling: CouplingType) -> None:
        """Set the channel's input coupling."""
        ...

    def get_channel_attenuation(self, channel: int) -> float:
        """Return the probe attenuation factor (e.g. 10.0 for a 10X probe)."""
        ...

    def set_channel_attenuation(self, channel: int, attenuation: float) -> None:
        """Set the probe attenuation factor."""
        ...

    # -- Triggering --

    def start(self) -> None:
        """Arm the trigger for continuous acquisition."""
        ...

    def start_single_trigger(self) -> None:
        """Arm the trigger for exactly one acquisition."""
        ...

    def stop(self) -> None:
        """Disarm the trigger."""
        ...

    def force_trigger(self) -> None:
        """Force one acquisition."""
        ...

    def poll_trigger(self) -> TriggerMode:
        """Return the current trigger status."""
        ...

    def is_trigger_armed(self) -> bool:
        """Return True if the trigger is armed."""
        ...

    def acquire_data(self) -> bool:
        """Fetch and queue one waveform set.

        Returns:
            True if a waveform set was queued.
        """
        ...

    def pop_waveforms(self) -> WaveformSet | None:
        """Return the oldest pending waveform set, or None if none is queued."""
        ...

    # -- Acquisition settings --

    def get_sample_depths(self) -> tuple[int, ...]:
        """Return the selectable memory depths in samples."""
        ...

    def get_sample_depth(self) -> int:
        """Return the active memory depth in samples."""
        ...

    def set_sample_depth(self, depth: int) -> None:
        """Select a memory depth in samples."""
        ...

    def get_sample_rates(self) -> tuple[int, ...]:
        """Return the selectable sample rates in samples per second."""
        ...

    def get_sample_rate(self) -> int:
        """Return the active sample rate in samples per second."""
        ...
