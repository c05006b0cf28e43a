"""Merkle hasher service: hash-tree-roots and content hashes.

Computes the 32-byte content hash of a canonical encoding and produces
chunk inclusion proofs against it.

Algorithm:
1. Split the encoding into 32-byte chunks, zero-padding the last one.
   An empty encoding becomes a single zero chunk.
2. Pad the chunk list with zero chunks up to a power of two.
3. Hash pairs bottom-up with the node hasher until one root remains.
   A single chunk is its own root.
4. Unless a fixed-size schema implies the length, mix it in:
   content_hash = H(root || length as 32-byte little-endian).

Step 4 keeps "a" and "a\\x00" apart: both pad to the same chunk, so only
the mixed-in length tells them apart.

Usage:
    hasher = MerkleHasherService()
    digest = hasher.content_hash(String("token"))
    proof = hasher.generate_proof(encoded, chunk_index=0)
    assert hasher.verify_inclusion(proof)
"""

from __future__ import annotations

import hmac

from causality_ssz.application.dtos.merkle import (
    ChunkInclusionProof,
    MerkleProofEntry,
    MerkleProofEntryDTO,
)
from causality_ssz.application.ports.node_hasher import NodeHasherProtocol
from causality_ssz.application.services.base import LoggingMixin
from causality_ssz.application.services.codec_service import SszCodecService
from causality_ssz.application.services.node_hash_service import get_node_hasher
from causality_ssz.config.codec_config import DEFAULT_CODEC_CONFIG, CodecConfig
from causality_ssz.domain.errors.input import InvalidInputError
from causality_ssz.domain.errors.internal import InternalError
from causality_ssz.domain.models.content_id import ContentHash
from causality_ssz.domain.models.schema import Schema
from causality_ssz.domain.models.value import Value

CHUNK_SIZE: int = 32
ZERO_CHUNK: bytes = bytes(CHUNK_SIZE)


def chunkify(data: bytes) -> list[bytes]:
    """Split ``data`` into 32-byte chunks, zero-padding the last.

    An empty input yields a single zero chunk.
    """
    if not data:
        return [ZERO_CHUNK]
    chunks = [data[i : i + CHUNK_SIZE] for i in range(0, len(data), CHUNK_SIZE)]
    chunks[-1] = chunks[-1].ljust(CHUNK_SIZE, b"\x00")
    return chunks


class MerkleHasherService(LoggingMixin):
    """Service for hash-tree-roots, content hashes and chunk proofs.

    Tree Structure:
    - Leaves are the 32-byte chunks of a canonical encoding
    - Non-power-of-2 chunk counts are padded with zero chunks
    - Parent is node_hash(left || right); order is significant

    Example:
        For 3 chunks [A, B, C]:

                    Root
                   /    \\
               H(A,B)   H(C,0)
               /  \\     /  \\
              A    B   C    0

        Proof for C: [(0, right), (H(A,B), left)]
    """

    def __init__(
        self,
        config: CodecConfig | None = None,
        codec: SszCodecService | None = None,
        node_hasher: NodeHasherProtocol | None = None,
    ) -> None:
        """Initialize the hasher.

        Args:
            config: Configuration; selects the node hash algorithm.
            codec: Codec used to encode Value inputs.
            node_hasher: Explicit node hasher, overriding the configured one.
        """
        self.config = config or DEFAULT_CODEC_CONFIG
        self._codec = codec or SszCodecService(self.config)
        self._hasher = node_hasher or get_node_hasher(self.config.hash_algorithm)
        self._init_logger(component="merkle")

    @property
    def algorithm(self) -> str:
        return str(self._hasher.algorithm)

    def build_tree(self, chunks: list[bytes]) -> tuple[bytes, list[list[bytes]]]:
        """Build a Merkle tree from 32-byte chunks.

        Pads to the next power of 2 with zero chunks.

        Args:
            chunks: The leaves, each exactly 32 bytes.

        Returns:
            Tuple of (root, tree_levels).
            tree_levels[0] = padded leaves, tree_levels[-1] = [root].

        Raises:
            InternalError: If ``chunks`` is empty or a chunk is not 32 bytes.
        """
        if not chunks:
            raise InternalError("Cannot merkleize zero chunks")
        for index, chunk in enumerate(chunks):
            if len(chunk) != CHUNK_SIZE:
                raise InternalError(
                    f"Chunk {index} is {len(chunk)} bytes, expected {CHUNK_SIZE}"
                )

        leaves = list(chunks)
        while len(leaves) & (len(leaves) - 1):  # Not power of 2
            leaves.append(ZERO_CHUNK)

        levels: list[list[bytes]] = [leaves]
        current = leaves

        while len(current) > 1:
            next_level = []
            for i in range(0, len(current), 2):
                next_level.append(self._hasher.hash_pair(current[i], current[i + 1]))
            levels.append(next_level)
            current = next_level

        return current[0], levels

    def merkleize(self, chunks: list[bytes]) -> bytes:
        """Return the root of the tree over ``chunks``.

        Raises:
            InternalError: If ``chunks`` is empty.
        """
        root, _ = self.build_tree(chunks)
        return root

    def mix_in_length(self, root: bytes, length: int) -> bytes:
        """Bind a byte length into a tree root."""
        return self._hasher.hash_pair(root, length.to_bytes(CHUNK_SIZE, "little"))

    def hash_tree_root(self, data: bytes, mix_length: bool = True) -> bytes:
        """Compute the hash-tree-root of an encoding.

        Args:
            data: Canonical encoding.
            mix_length: Whether to mix ``len(data)`` into the root.

        Returns:
            32-byte root.
        """
        root = self.merkleize(chunkify(data))
        if mix_length:
            root = self.mix_in_length(root, len(data))
        return root

    def content_hash(
        self,
        data: bytes | bytearray | memoryview | Value,
        schema: Schema | None = None,
    ) -> ContentHash:
        """Compute the content hash of a value or of its encoding.

        The result depends only on the canonical encoding and the schema,
        so ``content_hash(v, s) == content_hash(encode(v), s)`` for every
        input form. The length is mixed in unless a fixed-size schema
        implies it:
        - With a fixed-size schema: the tree root is the content hash.
        - With a variable-size schema, or no schema: the encoding length
          is mixed into the root.

        Args:
            data: A Value (encoded first) or its canonical encoding.
            schema: Optional shape. Validates a Value input and decides
                whether the length is mixed in.

        Returns:
            The 32-byte ContentHash.

        Raises:
            SerializationError: If a Value input cannot be encoded or does
                not conform to ``schema``.
            InvalidInputError: If ``data`` is neither a Value nor bytes-like,
                or ``schema`` is not a Schema.
        """
        if schema is not None and not isinstance(schema, Schema):
            raise InvalidInputError(
                f"schema must be a Schema, got {type(schema).__name__}", field="schema"
            )
        if isinstance(data, Value):
            encoded = self._codec.encode(data, schema)
        elif isinstance(data, (bytes, bytearray, memoryview)):
            encoded = bytes(data)
        else:
            raise InvalidInputError(
                f"content_hash takes a Value or bytes, got {type(data).__name__}",
                field="data",
            )
        mix_length = schema is None or not schema.is_fixed_size()
        digest = self.hash_tree_root(encoded, mix_length=mix_length)
        self._log_operation(
            "content_hash", length=len(encoded), length_mixed=mix_length
        ).debug("content_hash_computed", content_hash=digest.hex())
        return ContentHash(digest)

    def get_proof(
        self,
        chunk_index: int,
        tree_levels: list[list[bytes]],
    ) -> list[MerkleProofEntryDTO]:
        """Generate the sibling path for the chunk at ``chunk_index``.

        Args:
            chunk_index: Index of the chunk (0-based).
            tree_levels: Tree levels from build_tree().

        Returns:
            List of MerkleProofEntryDTO from chunk to root.
        """
        path = []
        idx = chunk_index

        for level in range(len(tree_levels) - 1):
            is_right = idx % 2 == 1
            sibling_idx = idx - 1 if is_right else idx + 1
            path.append(
                MerkleProofEntryDTO(
                    level=level,
                    position="left" if is_right else "right",
                    sibling_hash=tree_levels[level][sibling_idx],
                )
            )
            idx //= 2

        return path

    def verify_proof(
        self,
        chunk: bytes,
        proof: list[MerkleProofEntryDTO],
        expected_root: bytes,
    ) -> bool:
        """Verify a chunk's sibling path against a tree root.

        Args:
            chunk: The 32-byte chunk being proven.
            proof: Sibling path from get_proof().
            expected_root: Tree root (before length mixing).

        Returns:
            True if the path leads from ``chunk`` to ``expected_root``.
        """
        if len(chunk) != CHUNK_SIZE:
            return False
        current = chunk

        for entry in proof:
            if len(entry.sibling_hash) != CHUNK_SIZE:
                return False
            if entry.position == "left":
                current = self._hasher.hash_pair(entry.sibling_hash, current)
            else:
                current = self._hasher.hash_pair(current, entry.sibling_hash)

        return hmac.compare_digest(current, expected_root)

    def generate_proof(
        self,
        data: bytes,
        chunk_index: int,
        mix_length: bool = True,
    ) -> ChunkInclusionProof:
        """Build the tree over ``data`` and prove one chunk in one call.

        Args:
            data: Canonical encoding.
            chunk_index: Index of the chunk to prove (0-based).
            mix_length: Whether the content hash mixes in the length.

        Returns:
            A ChunkInclusionProof for the boundary.

        Raises:
            InvalidInputError: If chunk_index is out of range.
        """
        chunks = chunkify(bytes(data))
        if chunk_index < 0 or chunk_index >= len(chunks):
            raise InvalidInputError(
                f"Chunk index {chunk_index} out of range for {len(chunks)} chunks",
                field="chunk_index",
            )

        root, tree_levels = self.build_tree(chunks)
        digest = self.mix_in_length(root, len(data)) if mix_length else root
        return ChunkInclusionProof(
            chunk_index=chunk_index,
            chunk=chunks[chunk_index].hex(),
            tree_root=root.hex(),
            encoded_length=len(data),
            length_mixed=mix_length,
            content_hash=digest.hex(),
            algorithm=self.algorithm,
            path=[
                MerkleProofEntry.from_dto(entry)
                for entry in self.get_proof(chunk_index, tree_levels)
            ],
        )

    def verify_inclusion(self, proof: ChunkInclusionProof) -> bool:
        """Verify a ChunkInclusionProof end to end.

        The proof must match the tree shape that ``encoded_length`` implies:
        ``chunk_index`` names a real chunk, the path climbs exactly one
        sibling per level of the padded tree, and the bytes of the last
        chunk past the end of the encoding are zero. Then checks the
        sibling path up to tree_root and the length mixing from tree_root
        to content_hash.

        Returns:
            False on any mismatch, including a different algorithm.
        """
        if proof.algorithm != self.algorithm:
            return False

        chunk_count = max(1, -(-proof.encoded_length // CHUNK_SIZE))
        if proof.chunk_index >= chunk_count:
            return False
        if len(proof.path) != (chunk_count - 1).bit_length():
            return False
        # Sibling sides must follow from chunk_index, one entry per level
        idx = proof.chunk_index
        for level, entry in enumerate(proof.path):
            if entry.level != level:
                return False
            if entry.position != ("left" if idx % 2 else "right"):
                return False
            idx //= 2

        chunk = bytes.fromhex(proof.chunk)
        used = proof.encoded_length - proof.chunk_index * CHUNK_SIZE
        if used < CHUNK_SIZE and any(chunk[used:]):
            return False

        tree_root = bytes.fromhex(proof.tree_root)
        path = [entry.to_dto() for entry in proof.path]
        if not self.verify_proof(chunk, path, tree_root):
            return False
        expected = (
            self.mix_in_length(tree_root, proof.encoded_length)
            if proof.length_mixed
            else tree_root
        )
        return hmac.compare_digest(expected, bytes.fromhex(proof.content_hash))
