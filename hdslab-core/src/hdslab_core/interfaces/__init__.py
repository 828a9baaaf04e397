"""Capability interfaces for multi-role instruments.

Each role an instrument can play is a separate protocol. A combined
instrument exposes one object per role rather than one object implementing
all of them.

Protocols:
    Multimeter: Measurement mode, range and reading access.
    Oscilloscope: Channel setup, triggering and waveform retrieval.
    FunctionGenerator: Output enable, amplitude, offset, frequency, shape.
"""

from hdslab_core.interfaces.function_generator import FunctionGenerator
from hdslab_core.interfaces.multimeter import Multimeter
from hdslab_core.interfaces.oscilloscope import Oscilloscope

__all__ = [
    "FunctionGenerator",
    "Multimeter",
    "Oscilloscope",
]
