"""Core data types for hdslab.

Submodules:
    common: Base types (ChannelId, InstrumentIdentity, Timestamp)
    instrument: Role and setting enumerations (InstrumentType, MeasurementMode,
        CouplingType, TriggerMode, WaveShape)
    waveform: Acquisition results (WaveformRecord, WaveformSet)
"""

from hdslab_core.types.common import ChannelId, InstrumentIdentity, Timestamp
from hdslab_core.types.instrument import (
    CouplingType,
    InstrumentType,
    MeasurementMode,
    TriggerMode,
    WaveShape,
)
from hdslab_core.types.waveform import WaveformRecord, WaveformSet

__all__ = [
    "ChannelId",
    "CouplingType",
    "InstrumentIdentity",
    "InstrumentType",
    "MeasurementMode",
    "Timestamp",
    "TriggerMode",
    "WaveShape",
    "WaveformRecord",
    "WaveformSet",
]
