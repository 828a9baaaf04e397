"""SCPI transport protocol definition.

This module defines the :class:`ScpiTransport` protocol, the minimal contract
a physical link must provide to carry SCPI text and binary block replies.

Implementations include:
- :class:`hdslab_scpi.VisaResource`: PyVISA-backed transport for real hardware
- :class:`hdslab_owon.Hds200Emulator`: in-process HDS200 emulator
"""

from __future__ import annotations

from typing import Protocol


class ScpiTransport(Protocol):
    """Protocol for SCPI message transport.

    Callers are responsible for opening the transport before passing it to
    :class:`ScpiConnection`. Any class implementing ``write()``, ``read()``,
    ``read_raw()`` and ``close()`` with these signatures is a valid transport.

    ``read_raw()`` returns the payload of a binary block reply. Transports
    that receive IEEE 488.2 definite-length framing strip the header before
    returning.
    """

    def write(self, message: str) -> None:
        """Send a message to the instrument.

        Args:
            message: The SCPI command or query string to send.
        """
        ...

    def read(self) -> str:
        """Read a text response from the instrument.

        Returns:
            The response string with trailing whitespace stripped.
        """
        ...

    def read_raw(self) -> bytes:
        """Read a binary block response from the instrument.

        Returns:
            The block payload without framing.
        """
        ...

    def close(self) -> None:
        """Close the transport and release resources."""
        ...
