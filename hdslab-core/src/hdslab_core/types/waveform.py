"""Waveform data produced by oscilloscope acquisitions.

Classes:
    WaveformRecord: One channel's decoded, timestamped sample sequence.

Type Aliases:
    WaveformSet: All records captured by a single acquisition, keyed by channel.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from hdslab_core.types.common import ChannelId


@dataclass(frozen=True)
class WaveformRecord:
    """Uniformly sampled analog waveform for one channel.

    Attributes:
        channel: Channel the samples were captured on.
        samples: Voltage samples in acquisition order.
        sample_interval: Time between consecutive samples, in seconds.
        start_seconds: Whole seconds since the Unix epoch at capture time.
        start_fraction: Sub-second part of the capture time, in seconds.
        trigger_phase: Offset of the trigger point from the first sample,
            in seconds.
    """

    channel: ChannelId
    samples: tuple[float, ...]
    sample_interval: float
    start_seconds: int
    start_fraction: float
    trigger_phase: float = 0.0

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Time spanned by the record, in seconds."""
        return len(self.samples) * self.sample_interval

    def times(self) -> tuple[float, ...]:
        """Return the time of each sample relative to the first one."""
        return tuple(i * self.sample_interval for i in range(len(self.samples)))


WaveformSet = Mapping[ChannelId, WaveformRecord]
"""Records captured together by one acquisition, keyed by channel."""
