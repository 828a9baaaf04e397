"""Exception types for hdslab-core.

This module defines the exception hierarchy used throughout hdslab. All hdslab
exceptions inherit from HdslabError, allowing consumers to catch all
library-specific errors with a single except clause.

Exception hierarchy:
    HdslabError (base)
    +-- SerializationError: Malformed binary data from an instrument
    +-- StateError: State machine violations

Recoverable device conditions (unsupported modes, unknown range labels,
range cycling that does not converge) are not exceptions. Drivers log them
and report a boolean result so the instrument session stays usable.
"""


class HdslabError(Exception):
    """Base exception for all hdslab errors.

    This is the root of the hdslab exception hierarchy. Catch this to handle
    any library-specific error, including transport failures.
    """


class SerializationError(HdslabError):
    """Raised when binary data returned by an instrument cannot be decoded.

    Common causes include truncated block replies or a block header whose
    declared length does not match the payload.
    """


class StateError(HdslabError):
    """Raised for invalid state or state transition errors.

    This may occur when an operation requires a capability the connected
    model does not have, such as the AWG on a non-``S`` HDS200 model.
    """
