"""SCPI number parsing and formatting utilities.

Parses the unit-suffixed numeric replies handheld instruments return
(``"1.234V"``, ``"8K"``) and formats values for commands, including the
special tokens NAN/INF/NINF.
"""

from __future__ import annotations

import math
import re

# Leading SCPI number followed by an optional unit/suffix.
_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*(\S*)\s*$")


def split_unit(text: str) -> tuple[float, str]:
    """Split a reply such as ``"4.998V"`` into its value and suffix.

    Args:
        text: The raw response string.

    Returns:
        Tuple of (numeric value, suffix). The suffix is empty when the reply
        is a bare number.

    Raises:
        ValueError: If *text* does not start with a number.
    """
    match = _LEADING_NUMBER_RE.match(text)
    if match is None:
        raise ValueError(f"Invalid SCPI number: {text!r}")
    return float(match.group(1)), match.group(2)


def format_number(value: float) -> str:
    """Format a float for use in a SCPI command.

    ``nan``, ``inf`` and ``-inf`` are rendered as ``NAN``, ``INF`` and
    ``NINF``. Finite values use Python's default ``str()`` representation.
    """
    if math.isnan(value):
        return "NAN"
    if math.isinf(value):
        return "NINF" if value < 0 else "INF"
    return str(value)


def format_on_off(value: bool) -> str:
    """Format a boolean as the ``ON``/``OFF`` token the HDS200 expects."""
    return "ON" if value else "OFF"
