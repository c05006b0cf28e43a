"""Identity service: stable content IDs for domain records.

Resources, expressions, intents and effects are each described by a
Record value. Their ID is the content hash of the record's canonical
encoding, so identical content (same field values, same order) always
yields the identical ID and any field change yields a different one.

Nothing is cached; every call recomputes from the record.

Usage:
    identity = IdentityService()
    token = Record.of(
        type=String("token"),
        domain_id=DomainId.null().to_value(),
        quantity=Int(100),
    )
    resource_id = identity.compute_resource_id(token)
"""

from __future__ import annotations

import hmac
from typing import TypeVar

from causality_ssz.application.services.base import LoggingMixin
from causality_ssz.application.services.merkle_hasher_service import (
    MerkleHasherService,
)
from causality_ssz.config.codec_config import DEFAULT_CODEC_CONFIG, CodecConfig
from causality_ssz.domain.errors.input import InvalidInputError
from causality_ssz.domain.models.content_id import (
    ContentHash,
    EffectId,
    ExpressionId,
    IntentId,
    ResourceId,
)
from causality_ssz.domain.models.schema import RecordSchema
from causality_ssz.domain.models.value import Record

_IdT = TypeVar("_IdT", bound=ContentHash)


class IdentityService(LoggingMixin):
    """Derives typed 32-byte IDs from domain records.

    Attributes:
        config: Configuration shared with the underlying hasher.
    """

    def __init__(
        self,
        config: CodecConfig | None = None,
        hasher: MerkleHasherService | None = None,
    ) -> None:
        """Initialize the identity service.

        Args:
            config: Configuration. Defaults to DEFAULT_CODEC_CONFIG.
            hasher: Merkle hasher to use. Built from ``config`` if omitted.
        """
        self.config = config or DEFAULT_CODEC_CONFIG
        self._hasher = hasher or MerkleHasherService(self.config)
        self._init_logger(component="identity")

    def compute_id(
        self, record: Record, schema: RecordSchema | None = None
    ) -> ContentHash:
        """Compute the untyped content ID of a record.

        Args:
            record: The domain record.
            schema: Optional record schema the record must conform to.

        Returns:
            The 32-byte ContentHash of the record's canonical encoding.

        Raises:
            InvalidInputError: If ``record`` is not a Record.
            SerializationError: If the record does not conform to ``schema``.
        """
        if not isinstance(record, Record):
            raise InvalidInputError(
                f"IDs are computed from Records, got {type(record).__name__}",
                field="record",
            )
        if schema is not None and not isinstance(schema, RecordSchema):
            raise InvalidInputError(
                f"schema must be a RecordSchema, got {type(schema).__name__}",
                field="schema",
            )
        content_id = self._hasher.content_hash(record, schema)
        self._log_operation("compute_id", fields=len(record.fields)).debug(
            "id_computed", content_id=content_id.hex()
        )
        return content_id

    def _typed(
        self, id_type: type[_IdT], record: Record, schema: RecordSchema | None
    ) -> _IdT:
        return id_type(self.compute_id(record, schema).digest)

    def compute_resource_id(
        self, record: Record, schema: RecordSchema | None = None
    ) -> ResourceId:
        return self._typed(ResourceId, record, schema)

    def compute_expression_id(
        self, record: Record, schema: RecordSchema | None = None
    ) -> ExpressionId:
        return self._typed(ExpressionId, record, schema)

    def compute_intent_id(
        self, record: Record, schema: RecordSchema | None = None
    ) -> IntentId:
        return self._typed(IntentId, record, schema)

    def compute_effect_id(
        self, record: Record, schema: RecordSchema | None = None
    ) -> EffectId:
        return self._typed(EffectId, record, schema)

    def verify_id(
        self,
        record: Record,
        expected: ContentHash | bytes,
        schema: RecordSchema | None = None,
    ) -> bool:
        """Check that ``record`` hashes to ``expected``.

        Performs constant-time comparison using hmac.compare_digest().

        Args:
            record: The domain record.
            expected: The claimed ID, typed or raw.
            schema: Optional record schema.

        Returns:
            True if the recomputed ID matches.

        Raises:
            InvalidInputError: If ``expected`` is not exactly 32 bytes.
        """
        if isinstance(expected, ContentHash):
            expected_bytes = expected.digest
        else:
            expected_bytes = id_from_bytes(expected).digest
        actual = self.compute_id(record, schema).digest
        return hmac.compare_digest(actual, expected_bytes)


def id_from_bytes(
    raw: bytes | bytearray | memoryview,
    id_type: type[ContentHash] = ContentHash,
) -> ContentHash:
    """Wrap a caller-supplied buffer as a typed ID.

    Args:
        raw: Exactly 32 bytes.
        id_type: ContentHash or one of its typed aliases.

    Returns:
        The typed ID.

    Raises:
        InvalidInputError: If ``raw`` is not bytes-like or not 32 bytes.
    """
    if not isinstance(raw, (bytes, bytearray, memoryview)):
        raise InvalidInputError(
            f"ID buffer must be bytes-like, got {type(raw).__name__}", field="raw"
        )
    return id_type(bytes(raw))
