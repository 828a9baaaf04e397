"""OWON HDS200 series instrument driver.

Composes one :class:`~hdslab_owon.state.Hds200State` with the meter, scope
and (on ``S`` models) function generator facets.
"""

from __future__ import annotations

import logging
from pathlib import Path

from hdslab_core.errors import StateError
from hdslab_core.types.common import InstrumentIdentity
from hdslab_core.types.instrument import InstrumentType
from hdslab_scpi import ScpiConnection, VisaResource

from hdslab_owon.awg import Hds200Awg
from hdslab_owon.config import Hds200Config, load_config
from hdslab_owon.meter import Hds200Meter
from hdslab_owon.scope import Hds200Scope
from hdslab_owon.state import Hds200State

logger = logging.getLogger(__name__)

DRIVER_NAME = "owon_hds200"

# Channel index -> (name, role)
_CHANNELS: tuple[tuple[str, InstrumentType], ...] = (
    ("VIN", InstrumentType.DMM),
    ("CH1", InstrumentType.OSCILLOSCOPE),
    ("CH2", InstrumentType.OSCILLOSCOPE),
    ("AWG", InstrumentType.FUNCTION),
)


class OwonHds200:
    """High-level driver for OWON HDS200 handheld oscilloscope/meter/AWG.

    Args:
        connection: An open ``ScpiConnection`` to the instrument.
        config: Driver configuration. Defaults apply when omitted.

    Example:
        >>> hds = create_instrument("USB0::0x5345::0x1235::SN123::INSTR")
        >>> hds.meter.set_mode(MeasurementMode.RESISTANCE)
        >>> hds.meter.set_range("20k")
        >>> ohms = hds.meter.read_value()
    """

    def __init__(self, connection: ScpiConnection, config: Hds200Config | None = None) -> None:
        identity = connection.get_identity()
        self._state = Hds200State(conn=connection, identity=identity, config=config or Hds200Config())
        self._meter = Hds200Meter(self._state)
        self._scope = Hds200Scope(self._state)
        self._awg = Hds200Awg(self._state) if self._state.has_awg else None
        logger.info(
            "Connected to %s %s (serial %s, AWG %s)",
            identity.manufacturer,
            identity.model,
            identity.serial,
            "present" if self._awg is not None else "absent",
        )

    # -- Identity / lifecycle -----------------------------------------------

    @property
    def state(self) -> Hds200State:
        """Shared device state."""
        return self._state

    @property
    def driver_name(self) -> str:
        return DRIVER_NAME

    def get_identity(self) -> InstrumentIdentity:
        """Return the identity read at connection time."""
        return self._state.identity

    def close(self) -> None:
        """Close the underlying connection."""
        self._state.conn.close()

    # -- Roles --------------------------------------------------------------

    @property
    def has_awg(self) -> bool:
        return self._awg is not None

    @property
    def meter(self) -> Hds200Meter:
        return self._meter

    @property
    def scope(self) -> Hds200Scope:
        return self._scope

    @property
    def awg(self) -> Hds200Awg:
        """Function generator facet.

        Raises:
            StateError: If the connected model has no generator.
        """
        if self._awg is None:
            raise StateError(f"{self._state.identity.model} has no function generator")
        return self._awg

    def get_instrument_types(self) -> InstrumentType:
        types = InstrumentType.DMM | InstrumentType.OSCILLOSCOPE
        if self.has_awg:
            types |= InstrumentType.FUNCTION
        return types

    def get_channel_count(self) -> int:
        return len(_CHANNELS) if self.has_awg else len(_CHANNELS) - 1

    def get_channel_name(self, index: int) -> str:
        """Return the display name of channel *index*.

        Raises:
            IndexError: If *index* is not a channel of this model.
        """
        if not 0 <= index < self.get_channel_count():
            raise IndexError(f"Channel {index} out of range (0-{self.get_channel_count() - 1})")
        return _CHANNELS[index][0]

    def get_instrument_types_for_channel(self, index: int) -> InstrumentType:
        """Return the role of channel *index*, or NONE for unknown indices."""
        if 0 <= index < self.get_channel_count():
            return _CHANNELS[index][1]
        return InstrumentType.NONE


def create_instrument(
    visa_address: str, config: Hds200Config | str | Path | None = None
) -> OwonHds200:
    """Create an HDS200 driver from a VISA address.

    Opens the VISA resource, wraps it in a :class:`ScpiConnection` with error
    checking disabled (the device has no error queue) and the configured
    write spacing, and returns a ready-to-use :class:`OwonHds200`.

    Args:
        visa_address: VISA resource string
            (e.g. ``"USB0::0x5345::0x1235::HDS2102S1234::INSTR"``).
        config: Configuration object, or path to a YAML configuration file.

    Returns:
        Connected driver instance.
    """
    if config is None:
        config = Hds200Config()
    elif not isinstance(config, Hds200Config):
        config = load_config(config)
    resource = VisaResource(visa_address, timeout_ms=config.timeout_ms)
    resource.open()
    conn = ScpiConnection(resource, check_errors=False, min_interval=config.rate_limit_s)
    return OwonHds200(conn, config)
