"""Codec errors for SSZ encoding and decoding.

Provides the two failure kinds the codec can report. Both are
all-or-nothing: when one is raised, no partial output exists.
"""

from __future__ import annotations

from causality_ssz.domain.exceptions import CausalitySszError, ErrorKind


class SerializationError(CausalitySszError):
    """Error when a value violates an encoding invariant.

    Raised at encode time for schema or arity mismatches, nesting deeper
    than the configured limit, or containers whose offsets would not fit
    in 32 bits.

    Attributes:
        path: Location of the offending value (e.g. ``$.fields[2]``).
        reason: Description of the violated invariant.
    """

    kind = ErrorKind.SERIALIZATION

    def __init__(self, path: str, reason: str) -> None:
        """Initialize the error.

        Args:
            path: Location of the offending value.
            reason: Description of the violated invariant.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot encode value at {path}: {reason}")


class DeserializationError(CausalitySszError):
    """Error when a byte buffer fails structural validation.

    Raised at decode time for short buffers, bad offsets, unknown sum
    tags, invalid UTF-8, invalid booleans, excessive nesting, and
    trailing bytes in strict mode.

    Attributes:
        path: Location in the schema being decoded.
        reason: Description of the structural failure.
        offset: Byte position within the buffer being decoded, if known.
    """

    kind = ErrorKind.DESERIALIZATION

    def __init__(self, path: str, reason: str, offset: int | None = None) -> None:
        """Initialize the error.

        Args:
            path: Location in the schema being decoded.
            reason: Description of the structural failure.
            offset: Byte position within the buffer being decoded, if known.
        """
        self.path = path
        self.reason = reason
        self.offset = offset
        location = path if offset is None else f"{path} (byte {offset})"
        super().__init__(f"Cannot decode {location}: {reason}")
