"""SCPI protocol error types.

All exceptions inherit from :class:`hdslab_core.errors.HdslabError`.
"""

from __future__ import annotations

from dataclasses import dataclass

from hdslab_core.errors import HdslabError, SerializationError


class ScpiError(HdslabError):
    """Base exception for SCPI protocol errors."""


@dataclass(frozen=True)
class ScpiInstrumentError:
    """Single entry from an instrument's error queue.

    Attributes:
        code: SCPI error code (negative for standard errors).
        message: Human-readable error description from the instrument.
    """

    code: int
    message: str

    def __str__(self) -> str:
        return f'{self.code},"{self.message}"'


class ScpiCommandError(ScpiError):
    """Raised when an instrument reports errors after a command or query.

    Only raised when the connection's error checking is enabled. The HDS200
    has no ``SYST:ERR?`` queue, so its driver disables checking.

    Attributes:
        errors: One or more errors drained from the instrument's error queue.
    """

    def __init__(self, errors: tuple[ScpiInstrumentError, ...]) -> None:
        self.errors = errors
        messages = "; ".join(str(e) for e in errors)
        super().__init__(f"SCPI instrument error(s): {messages}")


class BlockFormatError(ScpiError, SerializationError):
    """Raised when an IEEE 488.2 definite-length block is malformed.

    Example causes: a missing ``#`` marker, a non-digit length field, or a
    payload shorter than the declared length.
    """
