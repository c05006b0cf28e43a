"""Internal and resource errors.

InternalError signals a programming defect inside the core and is never
user-recoverable. BufferAllocationError exists for the boundary layer,
which is the only place allocation can fail; the core never raises it.
"""

from causality_ssz.domain.exceptions import CausalitySszError, ErrorKind


class InternalError(CausalitySszError):
    """Error when the core detects a violation of its own invariants.

    Example: the Merkle hasher asked to merkleize zero chunks.
    """

    kind = ErrorKind.INTERNAL


class BufferAllocationError(CausalitySszError):
    """Error when the boundary layer cannot allocate an output buffer.

    Attributes:
        requested_bytes: Size of the allocation that failed.
    """

    kind = ErrorKind.MEMORY

    def __init__(self, requested_bytes: int) -> None:
        """Initialize the error.

        Args:
            requested_bytes: Size of the allocation that failed.
        """
        self.requested_bytes = requested_bytes
        super().__init__(f"Failed to allocate buffer of {requested_bytes} bytes")
