"""Invalid input errors.

Raised when a value, schema or identifier is constructed from malformed
arguments: non-UTF-8 text, out-of-range integers, duplicate record field
names, or an ID buffer that is not exactly 32 bytes.
"""

from __future__ import annotations

from causality_ssz.domain.exceptions import CausalitySszError, ErrorKind


class InvalidInputError(CausalitySszError):
    """Error when construction arguments are malformed.

    Attributes:
        field: Name of the offending argument, when known.
    """

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            field: Name of the offending argument, when known.
        """
        self.field = field
        super().__init__(message)
