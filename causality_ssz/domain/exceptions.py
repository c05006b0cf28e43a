"""Base exception classes for the causality-ssz domain layer."""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Discriminator carried by every causality-ssz error.

    The boundary layer maps these onto its own result codes, so the
    values are stable strings.
    """

    INVALID_INPUT = "invalid_input"
    SERIALIZATION = "serialization"
    DESERIALIZATION = "deserialization"
    MEMORY = "memory"
    INTERNAL = "internal"


class CausalitySszError(Exception):
    """Base exception for all causality-ssz errors.

    All package exceptions MUST inherit from this class and set ``kind``.
    Catching this class catches every failure the core can report.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
