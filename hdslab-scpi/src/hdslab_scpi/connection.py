"""SCPI connection with settle delays and rate limiting.

This module provides the :class:`ScpiConnection` class, which wraps a
transport layer to provide high-level SCPI operations: text, numeric and binary
block queries, optional error queue checking, post-command settle delays and
minimum spacing between consecutive writes.

Slow instruments need time to act on a command before the next one arrives.
:meth:`ScpiConnection.command` accepts a ``settle`` argument in seconds and
blocks the caller for that long after the write. The blocking function and
the clock are injectable so that tests can record delays instead of waiting.

Typical usage::

    from hdslab_scpi import VisaResource, ScpiConnection

    transport = VisaResource("USB0::0x5345::0x1235::SN123::INSTR")
    transport.open()
    conn = ScpiConnection(transport, check_errors=False, min_interval=0.001)

    identity = conn.get_identity()
    conn.command(":DMM:CONF RES", settle=0.4)
    ohms = conn.query_value(":DMM:MEAS?")

    conn.close()
"""

from __future__ import annotations

import logging
import re
import time
from typing import TYPE_CHECKING, Callable

from hdslab_core.types.common import InstrumentIdentity

from hdslab_scpi.errors import ScpiCommandError, ScpiInstrumentError
from hdslab_scpi.number import split_unit

if TYPE_CHECKING:
    from hdslab_scpi.transport import ScpiTransport

logger = logging.getLogger(__name__)


def parse_idn_response(response: str) -> InstrumentIdentity:
    """Parse a SCPI ``*IDN?`` response into an :class:`InstrumentIdentity`.

    The standard response is four comma-separated fields::

        manufacturer,model,serial_number,firmware_version

    Extra fields are joined into the firmware string.

    Args:
        response: The raw ``*IDN?`` response string.

    Returns:
        Parsed identity.

    Raises:
        ValueError: If the response has fewer than four fields.
    """
    parts = [p.strip() for p in response.split(",")]
    if len(parts) < 4:
        raise ValueError(
            f"Expected at least 4 comma-separated fields in *IDN? response, "
            f"got {len(parts)}: {response!r}"
        )
    return InstrumentIdentity(
        manufacturer=parts[0],
        model=parts[1],
        serial=parts[2],
        firmware=",".join(parts[3:]),
    )


# Matches SCPI error responses: optional +/- code, comma, optional quoted message.
_ERROR_RE = re.compile(r"^\s*([+-]?\d+)\s*,\s*\"?([^\"]*)\"?\s*$")


class ScpiConnection:
    """High-level SCPI connection wrapping a transport.

    Args:
        transport: An open :class:`ScpiTransport` instance.
        check_errors: If True (default), every command and query is followed
            by draining the instrument error queue via ``SYST:ERR?``.
        min_interval: Minimum time in seconds between consecutive writes.
            Zero disables rate limiting.
        sleep: Blocking delay function. Defaults to :func:`time.sleep`.
        clock: Monotonic clock in seconds. Defaults to :func:`time.monotonic`.

    Example:
        >>> conn = ScpiConnection(transport, check_errors=False)
        >>> conn.command(":DMM:CONF:VOLT DC", settle=0.4)
        >>> volts = conn.query_value(":DMM:MEAS?")
    """

    def __init__(
        self,
        transport: ScpiTransport,
        *,
        check_errors: bool = True,
        min_interval: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {min_interval}")
        self._transport = transport
        self._check_errors = check_errors
        self._min_interval = min_interval
        self._sleep = sleep
        self._clock = clock
        self._last_write: float | None = None

    @property
    def min_interval(self) -> float:
        """Minimum spacing between writes, in seconds."""
        return self._min_interval

    # -- Core operations -----------------------------------------------------

    def command(self, cmd: str, *, settle: float | None = None, check: bool | None = None) -> None:
        """Send a SCPI command (no response expected).

        Args:
            cmd: The SCPI command string (e.g. ``":DMM:CONF RES"``).
            settle: Seconds to block after the write so the instrument can
                act on the command.
            check: Override the instance-level error check setting.

        Raises:
            ScpiCommandError: If the instrument reports errors.
        """
        self._write(cmd)
        if settle:
            self.settle(settle)
        self._check(check)

    def query(self, cmd: str, *, check: bool | None = None) -> str:
        """Send a SCPI query and return the response.

        Returns:
            The instrument response with surrounding whitespace stripped.

        Raises:
            ScpiCommandError: If the instrument reports errors.
        """
        self._write(cmd)
        response = self._transport.read().strip()
        logger.debug("%s -> %r", cmd, response)
        self._check(check)
        return response

    def query_block(self, cmd: str, *, check: bool | None = None) -> bytes:
        """Send a SCPI query whose reply is a binary block.

        Returns:
            The block payload as delivered by the transport.

        Raises:
            ScpiCommandError: If the instrument reports errors.
        """
        self._write(cmd)
        payload = self._transport.read_raw()
        logger.debug("%s -> %d byte block", cmd, len(payload))
        self._check(check)
        return payload

    def settle(self, seconds: float) -> None:
        """Block for *seconds* while the instrument settles."""
        logger.debug("Settling for %.3f s", seconds)
        self._sleep(seconds)

    # -- Numeric queries ---------------------------------------------------

    def query_value(self, cmd: str, *, check: bool | None = None) -> float:
        """Query and parse a number that may carry a unit suffix.

        ``"4.998V"`` and ``"4.998"`` both yield ``4.998``.

        Raises:
            ValueError: If the response does not start with a number.
        """
        value, _unit = split_unit(self.query(cmd, check=check))
        return value

    # -- IEEE 488.2 convenience methods --------------------------------------

    def identify(self) -> str:
        """Query the raw instrument identification string (``*IDN?``)."""
        return self.query("*IDN?")

    def get_identity(self) -> InstrumentIdentity:
        """Query and parse the instrument identification (``*IDN?``)."""
        return parse_idn_response(self.identify())

    # -- Error queue ---------------------------------------------------------

    def get_errors(self) -> tuple[ScpiInstrumentError, ...]:
        """Drain the instrument error queue.

        Repeatedly queries ``SYST:ERR?`` until the instrument reports code 0.

        Returns:
            Every queued error, oldest first. Empty if there are none.
        """
        errors: list[ScpiInstrumentError] = []
        while True:
            self._write("SYST:ERR?")
            raw = self._transport.read().strip()
            error = self._parse_error_response(raw)
            if error is None:
                break
            errors.append(error)
        return tuple(errors)

    # -- Lifecycle -----------------------------------------------------------

    def close(self) -> None:
        """Close the underlying transport."""
        self._transport.close()

    # -- Private helpers -----------------------------------------------------

    def _write(self, message: str) -> None:
        """Write *message*, waiting out the remainder of the rate limit first."""
        if self._min_interval > 0 and self._last_write is not None:
            remaining = self._min_interval - (self._clock() - self._last_write)
            if remaining > 0:
                self._sleep(remaining)
        logger.debug("write %s", message)
        self._transport.write(message)
        self._last_write = self._clock()

    def _check(self, override: bool | None) -> None:
        """Drain the error queue and raise if errors are found."""
        should_check = self._check_errors if override is None else override
        if not should_check:
            return
        errors = self.get_errors()
        if errors:
            raise ScpiCommandError(errors)

    @staticmethod
    def _parse_error_response(raw: str) -> ScpiInstrumentError | None:
        """Parse a ``SYST:ERR?`` response; ``None`` means no error."""
        match = _ERROR_RE.match(raw)
        if match is None:
            return None
        code = int(match.group(1))
        if code == 0:
            return None
        return ScpiInstrumentError(code=code, message=match.group(2).strip())
