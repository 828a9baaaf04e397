"""Oscilloscope trigger state and waveform acquisition.

The HDS200 does not report live trigger status. The host arms the engine,
polls :meth:`AcquisitionEngine.poll_trigger` and calls
:meth:`AcquisitionEngine.acquire_data` while it reports TRIGGERED. Each
acquisition fetches the screen waveform as a raw block, decodes it and
queues the result.
"""

from __future__ import annotations

import logging
import struct
from enum import Enum
from typing import Callable

from hdslab_core.queue import PendingWaveformQueue
from hdslab_core.types.common import ChannelId, Timestamp
from hdslab_core.types.instrument import TriggerMode
from hdslab_core.types.waveform import WaveformRecord, WaveformSet
from hdslab_scpi import ScpiConnection, split_unit

from hdslab_owon.config import AcquisitionConfig

logger = logging.getLogger(__name__)

RAW_FULL_SCALE = 65535.0
SAMPLE_DEPTHS: tuple[int, ...] = (4000, 8000)


class SampleDepthQuery:
    """Fetch capability reading the memory depth in samples.

    ``:ACQ:DEPM?`` reports thousands of samples (``"4K"`` or ``"4"``).
    """

    def __init__(self, conn: ScpiConnection) -> None:
        self._conn = conn

    def fetch(self) -> int:
        thousands, _suffix = split_unit(self._conn.query(":ACQ:DEPM?"))
        return int(thousands * 1000)


class TriggerState(Enum):
    """Arm state of the acquisition engine.

    Transitions are pure: each method returns the next state.
    """

    DISARMED = "disarmed"
    ARMED = "armed"
    ARMED_ONE_SHOT = "armed_one_shot"

    @property
    def armed(self) -> bool:
        return self is not TriggerState.DISARMED

    def start(self) -> TriggerState:
        return TriggerState.ARMED

    def start_single(self) -> TriggerState:
        return TriggerState.ARMED_ONE_SHOT

    def stop(self) -> TriggerState:
        return TriggerState.DISARMED

    def after_acquisition(self) -> TriggerState:
        """State after one waveform set has been queued."""
        if self is TriggerState.ARMED_ONE_SHOT:
            return TriggerState.DISARMED
        return self


def decode_samples(block: bytes, full_scale: float = 0.5) -> tuple[float, ...]:
    """Decode a raw waveform block into voltages.

    The block holds little-endian signed 16-bit samples. Each sample is
    scaled as ``raw / 65535 * full_scale``. A trailing odd byte is ignored.

    Args:
        block: Block payload.
        full_scale: Voltage corresponding to a raw value of 65535.

    Returns:
        Decoded voltages in acquisition order.
    """
    count = len(block) // 2
    raw = struct.unpack_from(f"<{count}h", block)
    scale = full_scale / RAW_FULL_SCALE
    return tuple(value * scale for value in raw)


class AcquisitionEngine:
    """Trigger state machine and waveform fetch/decode.

    Args:
        conn: Connection to the instrument.
        queue: Queue receiving decoded waveform sets.
        sample_depth: Returns the device memory depth in samples; decoded
            records are capped at this length.
        config: Waveform decode parameters.
    """

    def __init__(
        self,
        conn: ScpiConnection,
        queue: PendingWaveformQueue,
        sample_depth: Callable[[], int],
        config: AcquisitionConfig | None = None,
    ) -> None:
        self._conn = conn
        self._queue = queue
        self._sample_depth = sample_depth
        self._config = config or AcquisitionConfig()
        self._state = TriggerState.DISARMED

    @property
    def state(self) -> TriggerState:
        return self._state

    @property
    def channel_id(self) -> ChannelId:
        """Identifier of the channel each acquisition fetches."""
        return ChannelId(f"CH{self._config.channel}")

    # -- Trigger control ------------------------------------------------------

    def start(self) -> None:
        self._state = self._state.start()

    def start_single_trigger(self) -> None:
        self._state = self._state.start_single()

    def force_trigger(self) -> None:
        """Arm for a single acquisition; the device has no forced trigger."""
        self._state = self._state.start_single()

    def stop(self) -> None:
        self._state = self._state.stop()

    def poll_trigger(self) -> TriggerMode:
        """Report TRIGGERED whenever armed, STOP otherwise."""
        return TriggerMode.TRIGGERED if self._state.armed else TriggerMode.STOP

    def is_trigger_armed(self) -> bool:
        return self._state.armed

    # -- Acquisition ----------------------------------------------------------

    def acquire_data(self) -> bool:
        """Fetch, decode and queue one waveform set.

        Returns:
            False without touching the device if disarmed, otherwise True.
        """
        if not self._state.armed:
            return False

        header = self._conn.query_block(":DAT:WAV:SCR:HEAD?")
        logger.debug("Waveform header (%d bytes): %s", len(header), header.decode("utf-8", "replace"))

        block = self._conn.query_block(f":DAT:WAV:SCR:CH{self._config.channel}?")
        samples = decode_samples(block, self._config.full_scale_volts)
        depth = self._sample_depth()
        if len(samples) > depth:
            samples = samples[:depth]
        if not samples:
            logger.warning("Empty waveform block from %s", self.channel_id)

        seconds, fraction = Timestamp.now().split()
        record = WaveformRecord(
            channel=self.channel_id,
            samples=samples,
            sample_interval=self._config.sample_interval,
            start_seconds=seconds,
            start_fraction=fraction,
        )
        waveforms: WaveformSet = {record.channel: record}
        self._queue.push(waveforms)
        self._state = self._state.after_acquisition()
        return True

    def pop_waveforms(self) -> WaveformSet | None:
        """Return the oldest queued waveform set, or None."""
        return self._queue.pop()
