"""OWON HDS200 series driver for hdslab.

The HDS200 is a handheld two-channel oscilloscope with a built-in digital
multimeter and, on ``S`` models, an arbitrary waveform generator. This
package exposes each role as a separate facet over one shared device state:

- :class:`Hds200Meter`: mode selection with three-query read-back, range
  selection by blind cycling
- :class:`Hds200Scope`: channel setup, polled trigger and waveform decode
- :class:`Hds200Awg`: locally tracked generator settings

It also provides YAML-loadable configuration, an in-process emulator and a
TCP server exposing the emulator to external tools.

Typical usage::

    from hdslab_core import MeasurementMode
    from hdslab_owon import create_instrument

    hds = create_instrument("USB0::0x5345::0x1235::HDS2102S1234::INSTR")
    hds.meter.set_mode(MeasurementMode.DC_VOLTAGE)
    hds.meter.set_range("20")
    print(hds.meter.read_value())
    hds.close()
"""

from hdslab_owon.acquisition import AcquisitionEngine, TriggerState, decode_samples
from hdslab_owon.awg import AwgSettings, Hds200Awg
from hdslab_owon.config import (
    AcquisitionConfig,
    Hds200Config,
    SettleTimes,
    config_from_dict,
    load_config,
)
from hdslab_owon.device import OwonHds200, create_instrument
from hdslab_owon.emulator import (
    Hds200Emulator,
    Hds200EmulatorConfig,
    make_hds2102_emulator,
    make_hds2102s_emulator,
)
from hdslab_owon.meter import Hds200Meter
from hdslab_owon.mode import ModeReading, ModeResolver, classify_mode
from hdslab_owon.ranges import NO_RANGE, RANGE_TABLE, RangeController
from hdslab_owon.scope import Hds200Scope
from hdslab_owon.server import EmulatorServer
from hdslab_owon.state import Hds200State

__all__ = [
    # Driver
    "OwonHds200",
    "create_instrument",
    "Hds200State",
    # Facets
    "Hds200Awg",
    "Hds200Meter",
    "Hds200Scope",
    "AwgSettings",
    # Meter internals
    "ModeReading",
    "ModeResolver",
    "classify_mode",
    "NO_RANGE",
    "RANGE_TABLE",
    "RangeController",
    # Acquisition
    "AcquisitionEngine",
    "TriggerState",
    "decode_samples",
    # Configuration
    "AcquisitionConfig",
    "Hds200Config",
    "SettleTimes",
    "config_from_dict",
    "load_config",
    # Emulator
    "EmulatorServer",
    "Hds200Emulator",
    "Hds200EmulatorConfig",
    "make_hds2102_emulator",
    "make_hds2102s_emulator",
]
