"""Multimeter measurement mode selection and read-back.

The HDS200 has no single query that reports the active meter mode. Three
partial queries each recognise only their own tokens:

    ``:DMM:CONF?``       RS, R, C, DIODE
    ``:DMM:CONF:VOLT?``  DCV, ACV
    ``:DMM:CONF:CURR?``  DCA, ACA

:func:`classify_mode` maps a set of replies to a mode. :class:`ModeQuery` is
the fetch capability that runs the three queries in that fixed order, and
:class:`ModeResolver` caches its result and drives mode changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from hdslab_core.cache import LazyCache
from hdslab_core.types.instrument import MeasurementMode
from hdslab_scpi import ScpiConnection

logger = logging.getLogger(__name__)

MODE_COMMANDS: Mapping[MeasurementMode, str] = MappingProxyType(
    {
        MeasurementMode.DC_VOLTAGE: ":DMM:CONF:VOLT DC",
        MeasurementMode.AC_VOLTAGE: ":DMM:CONF:VOLT AC",
        MeasurementMode.DC_CURRENT: ":DMM:CONF:CURR DC",
        MeasurementMode.AC_CURRENT: ":DMM:CONF:CURR AC",
        MeasurementMode.RESISTANCE: ":DMM:CONF RES",
        MeasurementMode.CAPACITANCE: ":DMM:CONF CAP",
        MeasurementMode.CONTINUITY: ":DMM:CONF CONT",
        MeasurementMode.DIODE: ":DMM:CONF DIOD",
    }
)
"""Command selecting each mode the device supports."""

SUPPORTED_MODES: frozenset[MeasurementMode] = frozenset(MODE_COMMANDS)

_CONF_TOKENS: Mapping[str, MeasurementMode] = {
    "RS": MeasurementMode.CONTINUITY,
    "R": MeasurementMode.RESISTANCE,
    "C": MeasurementMode.CAPACITANCE,
    "DIODE": MeasurementMode.DIODE,
}
_VOLT_TOKENS: Mapping[str, MeasurementMode] = {
    "DCV": MeasurementMode.DC_VOLTAGE,
    "ACV": MeasurementMode.AC_VOLTAGE,
}
_CURR_TOKENS: Mapping[str, MeasurementMode] = {
    "DCA": MeasurementMode.DC_CURRENT,
    "ACA": MeasurementMode.AC_CURRENT,
}

FALLBACK_MODE = MeasurementMode.DC_VOLTAGE


@dataclass(frozen=True)
class ModeReading:
    """Result of reading the meter mode.

    Attributes:
        mode: The active (or assumed) measurement mode.
        resolved: False when no query matched and ``mode`` is the DC voltage
            fallback rather than a confirmed reading.
    """

    mode: MeasurementMode
    resolved: bool = True


def classify_mode(
    conf: str | None, volt: str | None = None, curr: str | None = None
) -> MeasurementMode | None:
    """Map the three mode query replies to a measurement mode.

    Each reply is only consulted for its own token set, in the order
    ``conf``, ``volt``, ``curr``. Replies not yet queried are passed as None.

    Args:
        conf: Reply to ``:DMM:CONF?``.
        volt: Reply to ``:DMM:CONF:VOLT?``.
        curr: Reply to ``:DMM:CONF:CURR?``.

    Returns:
        The matched mode, or None if no reply carries a recognised token.
    """
    for reply, tokens in ((conf, _CONF_TOKENS), (volt, _VOLT_TOKENS), (curr, _CURR_TOKENS)):
        if reply is None:
            continue
        mode = tokens.get(reply.strip().upper())
        if mode is not None:
            return mode
    return None


class ModeQuery:
    """Fetch capability reading the meter mode from the device.

    Issues only as many queries as needed: a match on ``:DMM:CONF?`` skips
    the voltage and current queries.
    """

    def __init__(self, conn: ScpiConnection) -> None:
        self._conn = conn

    def fetch(self) -> ModeReading:
        conf = self._conn.query(":DMM:CONF?")
        mode = classify_mode(conf)
        if mode is not None:
            return ModeReading(mode)

        volt = self._conn.query(":DMM:CONF:VOLT?")
        mode = classify_mode(conf, volt)
        if mode is not None:
            return ModeReading(mode)

        curr = self._conn.query(":DMM:CONF:CURR?")
        mode = classify_mode(conf, volt, curr)
        if mode is not None:
            return ModeReading(mode)

        logger.warning(
            "Unrecognised meter mode replies (%r, %r, %r); assuming %s",
            conf,
            volt,
            curr,
            FALLBACK_MODE.name,
        )
        return ModeReading(FALLBACK_MODE, resolved=False)


class ModeResolver:
    """Cached meter mode with write-through mode changes.

    Args:
        conn: Connection to the instrument.
        settle: Delay after a mode command, in seconds.
        cache_enabled: If False, every read queries the device.
    """

    def __init__(
        self, conn: ScpiConnection, *, settle: float = 0.4, cache_enabled: bool = True
    ) -> None:
        self._conn = conn
        self._settle = settle
        self._cache: LazyCache[ModeReading] = LazyCache(ModeQuery(conn), enabled=cache_enabled)

    @property
    def cache(self) -> LazyCache[ModeReading]:
        """The underlying mode cache."""
        return self._cache

    def get_reading(self) -> ModeReading:
        """Return the cached mode reading, querying the device on a miss."""
        return self._cache.get()

    def get_mode(self) -> MeasurementMode:
        """Return the active measurement mode."""
        return self._cache.get().mode

    @property
    def mode_resolved(self) -> bool:
        """False if the current mode is the unconfirmed DC voltage fallback."""
        return self._cache.get().resolved

    def set_mode(self, mode: MeasurementMode) -> bool:
        """Select a measurement mode.

        Sends one command, waits for the device to settle and records the
        new mode without reading it back.

        Returns:
            True if the mode was selected, False if the device lacks it.
        """
        command = MODE_COMMANDS.get(mode)
        if command is None:
            logger.warning("Measurement mode %s is not supported by the HDS200", mode.name)
            return False
        self._conn.command(command, settle=self._settle)
        self._cache.set(ModeReading(mode))
        return True

    def invalidate(self) -> None:
        """Force the next read to query the device."""
        self._cache.invalidate()
