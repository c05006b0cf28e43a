"""Domain errors for causality-ssz.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from CausalitySszError and carry an ErrorKind.
"""

from causality_ssz.domain.errors.codec import DeserializationError, SerializationError
from causality_ssz.domain.errors.input import InvalidInputError
from causality_ssz.domain.errors.internal import BufferAllocationError, InternalError

__all__: list[str] = [
    "BufferAllocationError",
    "DeserializationError",
    "InternalError",
    "InvalidInputError",
    "SerializationError",
]
