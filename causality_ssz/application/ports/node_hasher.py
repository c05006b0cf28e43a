"""Node hasher port for Merkle tree construction.

This module defines the interface for the cryptographic pair hash used at
every internal node of a hash-tree-root.

Developer Golden Rules:
1. DETERMINISM - Same input always produces same output
2. 32 BYTES - Every digest is exactly 32 bytes (256 bits)
3. NO SECRETS - Node hashes are never keyed
"""

from __future__ import annotations

from typing import Protocol

from causality_ssz.domain.models.codec_options import HashAlgorithm


class NodeHasherProtocol(Protocol):
    """Protocol for the Merkle node hash.

    Implementations: SHA-256 (hashlib) and BLAKE3 (blake3).

    Attributes:
        algorithm: Which hash this implementation computes.
        HASH_SIZE: Digest size in bytes (always 32).
    """

    algorithm: HashAlgorithm
    HASH_SIZE: int

    def hash_content(self, content: bytes) -> bytes:
        """Hash raw bytes to a 32-byte digest.

        Args:
            content: Bytes to hash.

        Returns:
            32-byte digest.
        """
        ...

    def hash_pair(self, left: bytes, right: bytes) -> bytes:
        """Hash the concatenation of two 32-byte children.

        Order matters: hash_pair(a, b) != hash_pair(b, a) in general.

        Args:
            left: Left child digest.
            right: Right child digest.

        Returns:
            32-byte parent digest.
        """
        ...
