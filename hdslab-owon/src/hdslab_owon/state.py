"""Device state shared by the HDS200 meter, scope and AWG facets."""

from __future__ import annotations

from dataclasses import dataclass, field

from hdslab_core.cache import LazyCache
from hdslab_core.queue import PendingWaveformQueue
from hdslab_core.types.common import InstrumentIdentity
from hdslab_scpi import ScpiConnection

from hdslab_owon.acquisition import AcquisitionEngine, SampleDepthQuery
from hdslab_owon.awg import AwgSettings
from hdslab_owon.config import Hds200Config
from hdslab_owon.mode import ModeResolver
from hdslab_owon.ranges import RangeController


@dataclass
class Hds200State:
    """Connection, caches and controllers for one HDS200.

    Built once per instrument; every facet holds a reference to the same
    state, so a mode set through the meter is the mode the scope sees.

    Attributes:
        conn: Connection to the instrument.
        identity: Parsed ``*IDN?`` reply.
        config: Driver configuration.
        queue: Waveform sets awaiting consumption.
        modes: Meter mode resolver.
        ranges: Meter range controller.
        sample_depth: Cached memory depth in samples.
        acquisition: Trigger state machine and waveform decode.
        awg: Locally tracked generator settings.
    """

    conn: ScpiConnection
    identity: InstrumentIdentity
    config: Hds200Config = field(default_factory=Hds200Config)
    queue: PendingWaveformQueue = field(default_factory=PendingWaveformQueue)
    modes: ModeResolver = field(init=False)
    ranges: RangeController = field(init=False)
    sample_depth: LazyCache[int] = field(init=False)
    acquisition: AcquisitionEngine = field(init=False)
    awg: AwgSettings = field(default_factory=AwgSettings)

    def __post_init__(self) -> None:
        cfg = self.config
        self.modes = ModeResolver(
            self.conn, settle=cfg.settle.mode, cache_enabled=cfg.cache_enabled
        )
        self.ranges = RangeController(
            self.conn, self.modes, settle=cfg.settle, max_cycles=cfg.max_range_cycles
        )
        self.sample_depth = LazyCache(SampleDepthQuery(self.conn), enabled=cfg.cache_enabled)
        self.acquisition = AcquisitionEngine(
            self.conn, self.queue, self.sample_depth.get, cfg.acquisition
        )

    @property
    def has_awg(self) -> bool:
        """Models whose name ends in ``S`` carry the waveform generator."""
        return self.identity.model.endswith("S")
