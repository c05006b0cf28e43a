"""Application services for causality-ssz.

- SszCodecService: canonical encode, schema-directed decode
- MerkleHasherService: hash-tree-roots, content hashes, chunk proofs
- IdentityService: typed 32-byte IDs for domain records
"""

from causality_ssz.application.services.codec_service import SszCodecService
from causality_ssz.application.services.identity_service import (
    IdentityService,
    id_from_bytes,
)
from causality_ssz.application.services.merkle_hasher_service import (
    CHUNK_SIZE,
    MerkleHasherService,
    chunkify,
)
from causality_ssz.application.services.node_hash_service import (
    Blake3NodeHashService,
    Sha256NodeHashService,
    get_node_hasher,
)

__all__: list[str] = [
    "CHUNK_SIZE",
    "Blake3NodeHashService",
    "IdentityService",
    "MerkleHasherService",
    "Sha256NodeHashService",
    "SszCodecService",
    "chunkify",
    "get_node_hasher",
    "id_from_bytes",
]
