"""PyVISA transport for SCPI instruments.

This module provides a VISA-based transport. PyVISA is imported lazily on
:meth:`VisaResource.open` so the rest of hdslab-scpi works without it.

The HDS200 enumerates as a USB-TMC device, e.g.
``USB0::0x5345::0x1235::HDS2102S1234::INSTR``.
"""

from __future__ import annotations

import logging
from typing import Any

from hdslab_core.errors import HdslabError

from hdslab_scpi.errors import BlockFormatError

logger = logging.getLogger(__name__)


class VisaResource:
    """SCPI transport backed by PyVISA.

    Implements the :class:`ScpiTransport` protocol. Binary block replies are
    read with PyVISA's IEEE 488.2 block reader and stripped of their header.

    Args:
        resource_string: VISA resource address.
        timeout_ms: I/O timeout in milliseconds (applied on open).
        read_termination: Character(s) that terminate read operations.
        write_termination: Character(s) appended to write operations.
        visa_library: PyVISA backend, e.g. ``"@py"`` for pyvisa-py. Empty
            selects PyVISA's default.
    """

    def __init__(
        self,
        resource_string: str,
        *,
        timeout_ms: int = 5000,
        read_termination: str = "\n",
        write_termination: str = "\n",
        visa_library: str = "",
    ) -> None:
        self._resource_string = resource_string
        self._visa_library = visa_library
        self._timeout_ms = timeout_ms
        self._read_termination = read_termination
        self._write_termination = write_termination
        self._rm: Any = None
        self._resource: Any = None

    @property
    def resource_string(self) -> str:
        """The VISA resource string."""
        return self._resource_string

    @property
    def is_open(self) -> bool:
        """Return True if the resource is currently open."""
        return self._resource is not None

    # -- Lifecycle -----------------------------------------------------------

    def open(self) -> None:
        """Open the VISA resource.

        Raises:
            HdslabError: If ``pyvisa`` is not installed or the resource
                cannot be opened.
        """
        if self._resource is not None:
            return

        try:
            import pyvisa  # type: ignore[import-not-found]  # pylint: disable=import-outside-toplevel
        except ImportError as exc:
            raise HdslabError(
                "pyvisa library is not installed. Install with: pip install pyvisa"
            ) from exc

        try:
            self._rm = pyvisa.ResourceManager(self._visa_library)
            self._resource = self._rm.open_resource(
                self._resource_string,
                read_termination=self._read_termination,
                write_termination=self._write_termination,
            )
            self._resource.timeout = self._timeout_ms
        except Exception as exc:
            self._resource = None
            if self._rm is not None:
                try:
                    self._rm.close()
                except Exception:  # pylint: disable=broad-except
                    logger.debug("Ignoring error closing resource manager", exc_info=True)
            self._rm = None
            raise HdslabError(
                f"Failed to open VISA resource {self._resource_string!r}: {exc}"
            ) from exc
        logger.info("Opened VISA resource %s", self._resource_string)

    def close(self) -> None:
        """Close the VISA resource and resource manager. Safe to call twice."""
        if self._resource is not None:
            try:
                self._resource.close()
            except Exception:  # pylint: disable=broad-except
                logger.debug("Ignoring error closing VISA resource", exc_info=True)
            self._resource = None
        if self._rm is not None:
            try:
                self._rm.close()
            except Exception:  # pylint: disable=broad-except
                logger.debug("Ignoring error closing resource manager", exc_info=True)
            self._rm = None

    # -- Transport interface -------------------------------------------------

    def write(self, message: str) -> None:
        """Send a message to the instrument.

        Raises:
            HdslabError: If the resource is not open.
        """
        self._require_open().write(message)

    def read(self) -> str:
        """Read a text response from the instrument.

        Raises:
            HdslabError: If the resource is not open.
        """
        result: str = self._require_open().read()
        return result

    def read_raw(self) -> bytes:
        """Read a binary block response and return its payload.

        PyVISA reads the declared payload length past any termination
        character inside the data, then consumes the trailing terminator.

        Raises:
            HdslabError: If the resource is not open.
            BlockFormatError: If the reply is not an IEEE 488.2 block.
        """
        resource = self._require_open()
        try:
            data: bytes = resource.read_binary_values(
                datatype="B",
                container=bytes,
                header_fmt="ieee",
                expect_termination=True,
            )
        except ValueError as exc:
            raise BlockFormatError(
                f"Malformed block reply from {self._resource_string!r}: {exc}"
            ) from exc
        return data

    def _require_open(self) -> Any:
        if self._resource is None:
            raise HdslabError("VISA resource is not open")
        return self._resource
