"""Unit tests for MerkleHasherService.

Tests chunking, tree building and padding, length mixing, content hashes
and chunk inclusion proofs.
"""

import hashlib

import blake3
import pytest

from causality_ssz.application.dtos.merkle import ChunkInclusionProof, MerkleProofEntry
from causality_ssz.application.services.merkle_hasher_service import (
    CHUNK_SIZE,
    ZERO_CHUNK,
    MerkleHasherService,
    chunkify,
)
from causality_ssz.config.codec_config import CodecConfig
from causality_ssz.domain.errors import (
    InternalError,
    InvalidInputError,
    SerializationError,
)
from causality_ssz.domain.models.codec_options import HashAlgorithm
from causality_ssz.domain.models.content_id import ContentHash
from causality_ssz.domain.models.schema import (
    BoolSchema,
    IntSchema,
    RecordSchema,
    StringSchema,
    UnitSchema,
)
from causality_ssz.domain.models.value import Bool, Int, Product, Record, String, Unit


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def length_chunk(length: int) -> bytes:
    return length.to_bytes(32, "little")


def chunk(data: bytes) -> bytes:
    return data.ljust(CHUNK_SIZE, b"\x00")


class TestChunkify:
    """Tests for chunkify()."""

    def test_empty_input_is_one_zero_chunk(self) -> None:
        assert chunkify(b"") == [ZERO_CHUNK]

    def test_short_input_is_padded(self) -> None:
        assert chunkify(b"a") == [chunk(b"a")]

    def test_exact_multiple_is_not_padded(self) -> None:
        data = bytes(range(64))
        assert chunkify(data) == [data[:32], data[32:]]

    def test_partial_last_chunk(self) -> None:
        data = b"\xaa" * 33
        assert chunkify(data) == [b"\xaa" * 32, chunk(b"\xaa")]


class TestBuildTree:
    """Tests for build_tree() and merkleize()."""

    def test_single_chunk_is_its_own_root(self, hasher: MerkleHasherService) -> None:
        leaf = b"\x07" * 32
        root, levels = hasher.build_tree([leaf])
        assert root == leaf
        assert levels == [[leaf]]

    def test_two_chunks(self, hasher: MerkleHasherService) -> None:
        a, b = b"\x01" * 32, b"\x02" * 32
        assert hasher.merkleize([a, b]) == sha256(a + b)

    def test_three_chunks_padded_with_zero_chunk(
        self, hasher: MerkleHasherService
    ) -> None:
        a, b, c = b"\x01" * 32, b"\x02" * 32, b"\x03" * 32
        root, levels = hasher.build_tree([a, b, c])
        assert levels[0] == [a, b, c, ZERO_CHUNK]
        assert len(levels) == 3
        assert root == sha256(sha256(a + b) + sha256(c + ZERO_CHUNK))

    def test_five_chunks_pad_to_eight(self, hasher: MerkleHasherService) -> None:
        _, levels = hasher.build_tree([b"\x01" * 32] * 5)
        assert len(levels[0]) == 8
        assert [len(level) for level in levels] == [8, 4, 2, 1]

    def test_zero_chunks_is_internal_error(self, hasher: MerkleHasherService) -> None:
        with pytest.raises(InternalError, match="zero chunks"):
            hasher.merkleize([])

    def test_wrong_chunk_size_is_internal_error(
        self, hasher: MerkleHasherService
    ) -> None:
        with pytest.raises(InternalError, match="Chunk 1"):
            hasher.build_tree([ZERO_CHUNK, b"\x00" * 31])


class TestHashTreeRoot:
    """Tests for length mixing."""

    def test_mix_in_length_formula(self, hasher: MerkleHasherService) -> None:
        root = b"\x09" * 32
        assert hasher.mix_in_length(root, 5) == sha256(root + length_chunk(5))

    def test_hash_tree_root_mixes_by_default(self, hasher: MerkleHasherService) -> None:
        assert hasher.hash_tree_root(b"a") == sha256(chunk(b"a") + length_chunk(1))

    def test_hash_tree_root_without_mixing(self, hasher: MerkleHasherService) -> None:
        assert hasher.hash_tree_root(b"a", mix_length=False) == chunk(b"a")

    def test_empty_encoding(self, hasher: MerkleHasherService) -> None:
        assert hasher.hash_tree_root(b"") == sha256(ZERO_CHUNK + length_chunk(0))

    def test_trailing_zero_is_distinguished_by_length(
        self, hasher: MerkleHasherService
    ) -> None:
        """'a' and 'a\\x00' pad to the same chunk; only the length differs."""
        unmixed_a = hasher.hash_tree_root(b"a", mix_length=False)
        unmixed_a0 = hasher.hash_tree_root(b"a\x00", mix_length=False)
        assert unmixed_a == unmixed_a0
        assert hasher.hash_tree_root(b"a") != hasher.hash_tree_root(b"a\x00")


class TestContentHash:
    """Tests for content_hash() length-mixing rules."""

    def test_fixed_schema_is_not_mixed(self, hasher: MerkleHasherService) -> None:
        digest = hasher.content_hash(Int(1), IntSchema())
        assert isinstance(digest, ContentHash)
        assert digest.digest == chunk(b"\x01")

    def test_variable_value_is_mixed(self, hasher: MerkleHasherService) -> None:
        assert hasher.content_hash(String("a")).digest == sha256(
            chunk(b"a") + length_chunk(1)
        )

    def test_fixed_value_without_schema_is_mixed(
        self, hasher: MerkleHasherService
    ) -> None:
        """Without a schema nothing implies the length, so it is mixed in."""
        assert hasher.content_hash(Int(1)).digest == sha256(
            chunk(b"\x01") + length_chunk(4)
        )

    def test_unit_value(self, hasher: MerkleHasherService) -> None:
        assert hasher.content_hash(Unit(), UnitSchema()).digest == ZERO_CHUNK
        assert hasher.content_hash(Unit()).digest == sha256(
            ZERO_CHUNK + length_chunk(0)
        )

    def test_strings_differing_by_trailing_nul(
        self, hasher: MerkleHasherService
    ) -> None:
        assert hasher.content_hash(String("a")) != hasher.content_hash(String("a\x00"))

    def test_strings_sharing_a_prefix(self, hasher: MerkleHasherService) -> None:
        """A string that is a byte-prefix of another never shares its hash."""
        assert hasher.content_hash(String("a")) != hasher.content_hash(String("aa"))
        assert hasher.content_hash(b"a") != hasher.content_hash(b"aa")

    def test_bytes_without_schema_are_mixed(self, hasher: MerkleHasherService) -> None:
        data = b"\x01\x00\x00\x00"
        assert hasher.content_hash(data).digest == sha256(chunk(data) + length_chunk(4))

    def test_bytes_with_fixed_schema_match_value(
        self, hasher: MerkleHasherService
    ) -> None:
        data = b"\x01\x00\x00\x00"
        assert hasher.content_hash(data, IntSchema()) == hasher.content_hash(
            Int(1), IntSchema()
        )

    def test_value_and_its_encoding_agree_without_schema(
        self, hasher: MerkleHasherService, codec
    ) -> None:
        record = Record.of(flag=Bool(True), quantity=Int(100))
        assert hasher.content_hash(record) == hasher.content_hash(codec.encode(record))

    def test_value_and_its_encoding_agree_with_fixed_schema(
        self, hasher: MerkleHasherService, codec
    ) -> None:
        record = Record.of(flag=Bool(True), quantity=Int(100))
        schema = RecordSchema.of(flag=BoolSchema(), quantity=IntSchema())
        assert hasher.content_hash(record, schema) == hasher.content_hash(
            codec.encode(record), schema
        )
        assert hasher.content_hash(record, schema).digest == chunk(
            b"\x01\x64\x00\x00\x00"
        )

    def test_bytes_with_variable_schema_match_value(
        self, hasher: MerkleHasherService
    ) -> None:
        assert hasher.content_hash(b"ab", StringSchema()) == hasher.content_hash(
            String("ab")
        )

    def test_multi_chunk_value(self, hasher: MerkleHasherService) -> None:
        text = "x" * 40
        encoded = text.encode()
        expected_root = sha256(encoded[:32] + chunk(encoded[32:]))
        assert hasher.content_hash(String(text)).digest == sha256(
            expected_root + length_chunk(40)
        )

    def test_record_field_change_changes_hash(
        self, hasher: MerkleHasherService, token_record
    ) -> None:
        changed = Record(
            tuple(
                (name, Int(101) if name == "quantity" else value)
                for name, value in token_record.fields
            )
        )
        assert hasher.content_hash(token_record) != hasher.content_hash(changed)

    def test_schema_mismatch_propagates(self, hasher: MerkleHasherService) -> None:
        with pytest.raises(SerializationError):
            hasher.content_hash(Int(1), StringSchema())

    def test_rejects_other_input_types(self, hasher: MerkleHasherService) -> None:
        with pytest.raises(InvalidInputError, match="Value or bytes"):
            hasher.content_hash("ab")  # type: ignore[arg-type]

    @pytest.mark.parametrize("data", [b"ab", String("ab")])
    def test_rejects_non_schema(self, hasher: MerkleHasherService, data) -> None:
        with pytest.raises(InvalidInputError, match="must be a Schema"):
            hasher.content_hash(data, "string")  # type: ignore[arg-type]

    def test_deterministic_across_instances(self, token_record) -> None:
        assert MerkleHasherService().content_hash(
            token_record
        ) == MerkleHasherService().content_hash(token_record)


class TestBlake3Hasher:
    """Tests for the BLAKE3 node hash option."""

    def test_blake3_content_hash(self) -> None:
        hasher = MerkleHasherService(CodecConfig(hash_algorithm=HashAlgorithm.BLAKE3))
        assert hasher.algorithm == "blake3"
        assert hasher.content_hash(String("a")).digest == blake3.blake3(
            chunk(b"a") + length_chunk(1)
        ).digest()

    def test_algorithms_give_different_ids(self, hasher: MerkleHasherService) -> None:
        blake = MerkleHasherService(CodecConfig(hash_algorithm=HashAlgorithm.BLAKE3))
        assert blake.content_hash(String("a")) != hasher.content_hash(String("a"))

    def test_fixed_single_chunk_value_is_algorithm_independent(
        self, hasher: MerkleHasherService
    ) -> None:
        blake = MerkleHasherService(CodecConfig(hash_algorithm=HashAlgorithm.BLAKE3))
        assert blake.content_hash(Int(1), IntSchema()) == hasher.content_hash(
            Int(1), IntSchema()
        )


class TestChunkProofs:
    """Tests for get_proof/verify_proof and inclusion proofs."""

    DATA = bytes(range(80))  # three chunks, padded to four

    def test_get_proof_sides(self, hasher: MerkleHasherService) -> None:
        _, levels = hasher.build_tree(chunkify(self.DATA))
        proof = hasher.get_proof(2, levels)
        assert [entry.position for entry in proof] == ["right", "left"]
        assert proof[0].sibling_hash == ZERO_CHUNK
        assert proof[1].sibling_hash == levels[1][0]

    @pytest.mark.parametrize("index", [0, 1, 2])
    def test_every_chunk_verifies(self, hasher: MerkleHasherService, index: int) -> None:
        root, levels = hasher.build_tree(chunkify(self.DATA))
        proof = hasher.get_proof(index, levels)
        assert hasher.verify_proof(chunkify(self.DATA)[index], proof, root)

    def test_wrong_chunk_fails(self, hasher: MerkleHasherService) -> None:
        root, levels = hasher.build_tree(chunkify(self.DATA))
        proof = hasher.get_proof(0, levels)
        assert not hasher.verify_proof(b"\xff" * 32, proof, root)

    def test_short_chunk_fails(self, hasher: MerkleHasherService) -> None:
        root, levels = hasher.build_tree(chunkify(self.DATA))
        assert not hasher.verify_proof(b"\x00", hasher.get_proof(0, levels), root)

    def test_generate_and_verify_inclusion(self, hasher: MerkleHasherService) -> None:
        proof = hasher.generate_proof(self.DATA, chunk_index=1)
        assert proof.content_hash == hasher.hash_tree_root(self.DATA).hex()
        assert proof.length_mixed is True
        assert proof.encoded_length == 80
        assert proof.algorithm == "sha256"
        assert hasher.verify_inclusion(proof)

    def test_unmixed_inclusion_proof(self, hasher: MerkleHasherService) -> None:
        proof = hasher.generate_proof(self.DATA, chunk_index=0, mix_length=False)
        assert proof.content_hash == proof.tree_root
        assert hasher.verify_inclusion(proof)

    def test_single_chunk_proof_has_empty_path(
        self, hasher: MerkleHasherService
    ) -> None:
        proof = hasher.generate_proof(b"ab", chunk_index=0)
        assert proof.path == []
        assert hasher.verify_inclusion(proof)

    def test_proof_survives_json_round_trip(self, hasher: MerkleHasherService) -> None:
        proof = hasher.generate_proof(self.DATA, chunk_index=2)
        restored = ChunkInclusionProof.model_validate_json(proof.model_dump_json())
        assert restored == proof
        assert hasher.verify_inclusion(restored)

    def test_tampered_length_fails(self, hasher: MerkleHasherService) -> None:
        proof = hasher.generate_proof(self.DATA, chunk_index=0)
        assert not hasher.verify_inclusion(proof.model_copy(update={"encoded_length": 81}))

    def test_tampered_chunk_fails(self, hasher: MerkleHasherService) -> None:
        proof = hasher.generate_proof(self.DATA, chunk_index=0)
        assert not hasher.verify_inclusion(proof.model_copy(update={"chunk": "00" * 32}))

    def test_claimed_index_must_match_path(self, hasher: MerkleHasherService) -> None:
        proof = hasher.generate_proof(self.DATA, chunk_index=0)
        assert not hasher.verify_inclusion(proof.model_copy(update={"chunk_index": 1}))

    def test_root_posing_as_chunk_with_empty_path_fails(
        self, hasher: MerkleHasherService
    ) -> None:
        """A two-chunk encoding cannot be proven with a zero-length path."""
        proof = hasher.generate_proof(b"\x11" * 40, chunk_index=0)
        forged = proof.model_copy(update={"chunk": proof.tree_root, "path": []})
        assert forged.content_hash == proof.content_hash
        assert not hasher.verify_inclusion(forged)

    def test_padding_chunk_cannot_be_proven(self, hasher: MerkleHasherService) -> None:
        """Index 3 is tree padding for a three-chunk encoding, not content."""
        _, levels = hasher.build_tree(chunkify(self.DATA))
        proof = hasher.generate_proof(self.DATA, chunk_index=2)
        forged = proof.model_copy(
            update={
                "chunk_index": 3,
                "chunk": ZERO_CHUNK.hex(),
                "path": [
                    MerkleProofEntry.from_dto(entry)
                    for entry in hasher.get_proof(3, levels)
                ],
            }
        )
        assert hasher.verify_proof(
            ZERO_CHUNK, [entry.to_dto() for entry in forged.path], levels[-1][0]
        )
        assert not hasher.verify_inclusion(forged)

    def test_path_levels_must_count_up_from_zero(
        self, hasher: MerkleHasherService
    ) -> None:
        proof = hasher.generate_proof(self.DATA, chunk_index=0)
        relabelled = [
            entry.model_copy(update={"level": entry.level + 1}) for entry in proof.path
        ]
        assert not hasher.verify_inclusion(proof.model_copy(update={"path": relabelled}))

    def test_extra_path_entry_fails(self, hasher: MerkleHasherService) -> None:
        proof = hasher.generate_proof(self.DATA, chunk_index=0)
        longer = [*proof.path, proof.path[-1].model_copy(update={"level": 2})]
        assert not hasher.verify_inclusion(proof.model_copy(update={"path": longer}))

    def test_bytes_past_encoded_length_must_be_zero(
        self, hasher: MerkleHasherService
    ) -> None:
        """A shorter claimed length cannot hide trailing bytes in the last chunk."""
        proof = hasher.generate_proof(b"\x11" * 40 + b"\xff", 1, mix_length=False)
        assert hasher.verify_inclusion(proof)
        assert not hasher.verify_inclusion(proof.model_copy(update={"encoded_length": 40}))

    def test_other_algorithm_rejected(self, hasher: MerkleHasherService) -> None:
        proof = hasher.generate_proof(self.DATA, chunk_index=0)
        blake = MerkleHasherService(CodecConfig(hash_algorithm=HashAlgorithm.BLAKE3))
        assert not blake.verify_inclusion(proof)

    @pytest.mark.parametrize("index", [-1, 3])
    def test_index_out_of_range(self, hasher: MerkleHasherService, index: int) -> None:
        with pytest.raises(InvalidInputError, match="out of range"):
            hasher.generate_proof(self.DATA, chunk_index=index)

    def test_proof_for_encoded_value(self, hasher: MerkleHasherService, codec) -> None:
        encoded = codec.encode(Product.of(String("x" * 50), Int(3)))
        proof = hasher.generate_proof(encoded, chunk_index=1)
        assert proof.content_hash == hasher.content_hash(encoded).hex()
        assert hasher.verify_inclusion(proof)
