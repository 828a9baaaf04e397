"""SCPI protocol library for hdslab instrument adapters.

This package provides the SCPI communication layer:

- Transport abstraction carrying text and binary block replies
- PyVISA-backed transport for real instruments
- Connection with settle delays, write rate limiting and optional error
  queue checking
- IEEE 488.2 definite-length block framing
- Number parsing and formatting utilities for SCPI responses

Typical usage::

    from hdslab_scpi import VisaResource, ScpiConnection

    transport = VisaResource("USB0::0x5345::0x1235::SN123::INSTR")
    transport.open()
    conn = ScpiConnection(transport, check_errors=False)
    print(conn.get_identity().model)
    conn.close()
"""

from hdslab_scpi.block import format_block
from hdslab_scpi.connection import ScpiConnection, parse_idn_response
from hdslab_scpi.errors import (
    BlockFormatError,
    ScpiCommandError,
    ScpiError,
    ScpiInstrumentError,
)
from hdslab_scpi.number import (
    format_number,
    format_on_off,
    split_unit,
)
from hdslab_scpi.transport import ScpiTransport
from hdslab_scpi.visa import VisaResource

__all__ = [
    # Block framing
    "format_block",
    # Connection
    "ScpiConnection",
    "parse_idn_response",
    # Errors
    "BlockFormatError",
    "ScpiCommandError",
    "ScpiError",
    "ScpiInstrumentError",
    # Number parsing/formatting
    "format_number",
    "format_on_off",
    "split_unit",
    # Transport
    "ScpiTransport",
    # VISA
    "VisaResource",
]
