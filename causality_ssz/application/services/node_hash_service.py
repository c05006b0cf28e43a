"""Merkle node hash implementations (SHA-256 and BLAKE3).

This module implements NodeHasherProtocol twice:

- Sha256NodeHashService: hashlib SHA-256. The default, and the hash the
  wider system already uses for its 32-byte IDs.
- Blake3NodeHashService: BLAKE3 via the blake3 package. Faster on modern
  hardware, fixed 32-byte output, selectable through configuration.

Usage:
    hasher = get_node_hasher(HashAlgorithm.SHA256)
    parent = hasher.hash_pair(left_chunk, right_chunk)
"""

from __future__ import annotations

import hashlib

import blake3

from causality_ssz.domain.errors.internal import InternalError
from causality_ssz.domain.models.codec_options import HashAlgorithm

NODE_SIZE: int = 32


def _check_children(left: bytes, right: bytes) -> None:
    if len(left) != NODE_SIZE or len(right) != NODE_SIZE:
        raise InternalError(
            f"Merkle children must be {NODE_SIZE} bytes, "
            f"got {len(left)} and {len(right)}"
        )


class Sha256NodeHashService:
    """SHA-256 implementation of the Merkle node hash."""

    algorithm: HashAlgorithm = HashAlgorithm.SHA256
    HASH_SIZE: int = NODE_SIZE

    def hash_content(self, content: bytes) -> bytes:
        return hashlib.sha256(content).digest()

    def hash_pair(self, left: bytes, right: bytes) -> bytes:
        _check_children(left, right)
        return hashlib.sha256(left + right).digest()


class Blake3NodeHashService:
    """BLAKE3 implementation of the Merkle node hash.

    Uses BLAKE3's default mode (not keyed or derive_key mode).
    """

    algorithm: HashAlgorithm = HashAlgorithm.BLAKE3
    HASH_SIZE: int = NODE_SIZE

    def hash_content(self, content: bytes) -> bytes:
        return blake3.blake3(content).digest()

    def hash_pair(self, left: bytes, right: bytes) -> bytes:
        _check_children(left, right)
        return blake3.blake3(left + right).digest()


def get_node_hasher(
    algorithm: HashAlgorithm,
) -> Sha256NodeHashService | Blake3NodeHashService:
    """Return the node hasher for ``algorithm``.

    Raises:
        InternalError: If the algorithm has no implementation.
    """
    if algorithm == HashAlgorithm.SHA256:
        return Sha256NodeHashService()
    if algorithm == HashAlgorithm.BLAKE3:
        return Blake3NodeHashService()
    raise InternalError(f"No node hasher for algorithm {algorithm!r}")
