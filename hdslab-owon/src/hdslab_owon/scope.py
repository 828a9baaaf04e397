"""HDS200 oscilloscope facet.

Channel indices follow the instrument's channel numbering: 1 and 2 are the
scope inputs. Other indices are ignored (setters do nothing, getters return
False or 0.0).
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from hdslab_core.types.instrument import CouplingType, TriggerMode
from hdslab_core.types.waveform import WaveformSet

from hdslab_owon.acquisition import SAMPLE_DEPTHS

if TYPE_CHECKING:
    from hdslab_owon.state import Hds200State

logger = logging.getLogger(__name__)

SCOPE_CHANNELS: tuple[int, ...] = (1, 2)

_COUPLING_TOKENS: Mapping[CouplingType, str] = MappingProxyType(
    {
        CouplingType.DC_1M: "DC",
        CouplingType.AC_1M: "AC",
        CouplingType.GND: "GND",
    }
)
_PROBE_TOKENS: Mapping[float, str] = MappingProxyType(
    {1.0: "1X", 10.0: "10X", 100.0: "100X", 1000.0: "1000X"}
)


class Hds200Scope:
    """Oscilloscope role of the HDS200.

    Args:
        state: Shared device state.
    """

    def __init__(self, state: Hds200State) -> None:
        self._state = state

    # -- Channels --

    def is_channel_enabled(self, channel: int) -> bool:
        if channel not in SCOPE_CHANNELS:
            return False
        return self._state.conn.query(f":CH{channel}:DISP?").upper() == "ON"

    def enable_channel(self, channel: int) -> None:
        if channel in SCOPE_CHANNELS:
            self._state.conn.command(f":CH{channel}:DISP ON")

    def disable_channel(self, channel: int) -> None:
        if channel in SCOPE_CHANNELS:
            self._state.conn.command(f":CH{channel}:DISP OFF")

    def get_available_couplings(self, channel: int) -> tuple[CouplingType, ...]:
        return (CouplingType.AC_1M, CouplingType.DC_1M, CouplingType.GND)

    def get_channel_coupling(self, channel: int) -> CouplingType:
        """Return the coupling; replies other than DC or AC read as GND."""
        if channel not in SCOPE_CHANNELS:
            return CouplingType.GND
        reply = self._state.conn.query(f":CH{channel}:COUP?").upper()
        if reply == "DC":
            return CouplingType.DC_1M
        if reply == "AC":
            return CouplingType.AC_1M
        return CouplingType.GND

    def set_channel_coupling(self, channel: int, coupling: CouplingType) -> None:
        if channel in SCOPE_CHANNELS:
            self._state.conn.command(f":CH{channel}:COUP {_COUPLING_TOKENS[coupling]}")

    def get_channel_attenuation(self, channel: int) -> float:
        """Return the probe factor, or 0.0 for an unrecognised reply."""
        if channel not in SCOPE_CHANNELS:
            return 0.0
        reply = self._state.conn.query(f":CH{channel}:PROB?").upper()
        for factor, token in _PROBE_TOKENS.items():
            if reply == token:
                return factor
        return 0.0

    def set_channel_attenuation(self, channel: int, attenuation: float) -> None:
        if channel not in SCOPE_CHANNELS:
            return
        token = _PROBE_TOKENS.get(float(attenuation))
        if token is None:
            logger.warning("Probe attenuation %gx is not supported by the HDS200", attenuation)
            return
        self._state.conn.command(f":CH{channel}:PROB {token}")

    # -- Triggering --

    def start(self) -> None:
        self._state.acquisition.start()

    def start_single_trigger(self) -> None:
        self._state.acquisition.start_single_trigger()

    def stop(self) -> None:
        self._state.acquisition.stop()

    def force_trigger(self) -> None:
        self._state.acquisition.force_trigger()

    def poll_trigger(self) -> TriggerMode:
        return self._state.acquisition.poll_trigger()

    def is_trigger_armed(self) -> bool:
        return self._state.acquisition.is_trigger_armed()

    def acquire_data(self) -> bool:
        return self._state.acquisition.acquire_data()

    def pop_waveforms(self) -> WaveformSet | None:
        return self._state.queue.pop()

    def drain_waveforms(self) -> list[WaveformSet]:
        """Return every queued waveform set, oldest first."""
        return self._state.queue.drain()

    # -- Acquisition settings --

    def get_sample_depths(self) -> tuple[int, ...]:
        return SAMPLE_DEPTHS

    def get_sample_depth(self) -> int:
        return self._state.sample_depth.get()

    def set_sample_depth(self, depth: int) -> None:
        """Select 8000 samples for ``depth == 8000``, 4000 otherwise."""
        actual = 8000 if depth == 8000 else 4000
        self._state.conn.command(f":ACQ:DEPM {actual // 1000}K")
        self._state.sample_depth.set(actual)

    def get_sample_rates(self) -> tuple[int, ...]:
        """The sample rate follows timebase and depth; none can be selected."""
        return ()

    def get_sample_rate(self) -> int:
        return 0

    def set_sample_rate(self, rate: int) -> None:
        logger.debug("HDS200 sample rate is not user selectable; ignoring %d", rate)

    def is_interleaving(self) -> bool:
        return False

    def get_bandwidth_limit(self, channel: int) -> int:
        return 0
