"""Merkle DTOs for the application layer.

This module contains two kinds of definitions:
1. Dataclass-based DTOs (DTO suffix) - raw bytes, for internal use
2. Pydantic models - hex strings, for handing proofs across the boundary
   as JSON

A chunk inclusion proof shows that one 32-byte chunk of a canonical
encoding is part of the encoding that produced a given content hash,
without revealing the rest of the encoding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

_HEX_32 = r"^[a-f0-9]{64}$"


@dataclass(frozen=True)
class MerkleProofEntryDTO:
    """Single sibling node in a Merkle proof path.

    Attributes:
        level: Tree level (0 = chunk level).
        position: Side of the sibling relative to the path node.
        sibling_hash: The sibling's 32 bytes.
    """

    level: int
    position: Literal["left", "right"]
    sibling_hash: bytes


class MerkleProofEntry(BaseModel):
    """Single sibling node in a Merkle proof path, hex encoded."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=0, description="Tree level (0 = chunks)")
    position: Literal["left", "right"] = Field(
        description="Position of sibling relative to path (left or right)",
    )
    sibling_hash: str = Field(
        description="32-byte sibling node",
        pattern=_HEX_32,
    )

    @classmethod
    def from_dto(cls, entry: MerkleProofEntryDTO) -> MerkleProofEntry:
        return cls(
            level=entry.level,
            position=entry.position,
            sibling_hash=entry.sibling_hash.hex(),
        )

    def to_dto(self) -> MerkleProofEntryDTO:
        return MerkleProofEntryDTO(
            level=self.level,
            position=self.position,
            sibling_hash=bytes.fromhex(self.sibling_hash),
        )


class ChunkInclusionProof(BaseModel):
    """Proof that a chunk belongs to the encoding behind a content hash.

    Attributes:
        chunk_index: Position of the chunk in the padded chunk list.
        chunk: The proven 32-byte chunk.
        tree_root: Root of the chunk tree before length mixing.
        encoded_length: Byte length of the canonical encoding.
        length_mixed: Whether content_hash mixes encoded_length into tree_root.
        content_hash: The final 32-byte content hash.
        algorithm: Node hash used throughout the tree.
        path: Sibling nodes from the chunk up to tree_root.
    """

    model_config = ConfigDict(frozen=True)

    chunk_index: int = Field(ge=0, description="Index of the proven chunk")
    chunk: str = Field(description="The proven 32-byte chunk", pattern=_HEX_32)
    tree_root: str = Field(description="Chunk tree root", pattern=_HEX_32)
    encoded_length: int = Field(ge=0, description="Length of the encoding")
    length_mixed: bool = Field(description="Whether the length is mixed in")
    content_hash: str = Field(description="Final content hash", pattern=_HEX_32)
    algorithm: str = Field(description="Merkle node hash algorithm")
    path: list[MerkleProofEntry] = Field(
        description="Sibling nodes from chunk to tree root",
    )
