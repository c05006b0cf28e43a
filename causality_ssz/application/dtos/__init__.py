"""Application-layer DTOs for causality-ssz."""

from causality_ssz.application.dtos.merkle import (
    ChunkInclusionProof,
    MerkleProofEntry,
    MerkleProofEntryDTO,
)

__all__: list[str] = [
    "ChunkInclusionProof",
    "MerkleProofEntry",
    "MerkleProofEntryDTO",
]
