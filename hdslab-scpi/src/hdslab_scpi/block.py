"""IEEE 488.2 definite-length arbitrary block framing.

A definite-length block is ``#`` followed by one digit *n*, then *n* digits
giving the payload length in bytes, then the payload itself::

    #41200<1200 bytes of payload>
"""

from __future__ import annotations

from hdslab_scpi.errors import BlockFormatError


def format_block(payload: bytes) -> bytes:
    """Wrap a payload in a definite-length block header.

    Args:
        payload: Raw bytes to frame.

    Returns:
        The framed block.

    Raises:
        BlockFormatError: If the payload is too large to describe with nine
            length digits.
    """
    length = str(len(payload))
    if len(length) > 9:
        raise BlockFormatError(f"Block payload too large: {len(payload)} bytes")
    return b"#" + str(len(length)).encode("ascii") + length.encode("ascii") + payload
