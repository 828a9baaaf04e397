"""Core library for hdslab instrument adapters.

This package provides the foundational data types, capability interfaces,
caching primitive and error types shared by the hdslab packages. It is
stdlib-only so that it can serve as the base layer for every other package.

Key components:
    - Types: identity, timestamps, role and setting enumerations, waveform
      records.
    - Interfaces: Protocol-based definitions of the multimeter, oscilloscope
      and function generator roles.
    - LazyCache: memoized instrument state with an injected fetch capability.
    - PendingWaveformQueue: lock-guarded queue shared between acquisition and
      consumers.
    - Errors: Hierarchy of exception types.
"""

from hdslab_core.cache import Fetcher, LazyCache
from hdslab_core.errors import HdslabError, SerializationError, StateError
from hdslab_core.interfaces import FunctionGenerator, Multimeter, Oscilloscope
from hdslab_core.queue import PendingWaveformQueue
from hdslab_core.types import (
    ChannelId,
    CouplingType,
    InstrumentIdentity,
    InstrumentType,
    MeasurementMode,
    Timestamp,
    TriggerMode,
    WaveformRecord,
    WaveformSet,
    WaveShape,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Cache and queue
    "Fetcher",
    "LazyCache",
    "PendingWaveformQueue",
    # Types
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
    # Interfaces
    "FunctionGenerator",
    "Multimeter",
    "Oscilloscope",
    # Errors
    "HdslabError",
    "SerializationError",
    "StateError",
]
