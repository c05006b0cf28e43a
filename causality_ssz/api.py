"""Public operations exposed to the boundary layer.

These module-level functions are the whole surface a host binding needs:
encode, decode, content_hash and compute_id, plus describe() for
diagnostics. They share one set of services built lazily from
CodecConfig.from_environment().

Usage:
    from causality_ssz import api

    data = api.encode(Int(1))          # b"\\x01\\x00\\x00\\x00"
    value = api.decode(data, IntSchema())
    digest = api.content_hash(data)
"""

from __future__ import annotations

from functools import lru_cache

from causality_ssz.application.services.codec_service import SszCodecService
from causality_ssz.application.services.identity_service import IdentityService
from causality_ssz.application.services.merkle_hasher_service import (
    MerkleHasherService,
)
from causality_ssz.config.codec_config import CodecConfig
from causality_ssz.domain.models.codec_options import Strictness
from causality_ssz.domain.models.content_id import ContentHash
from causality_ssz.domain.models.schema import RecordSchema, Schema
from causality_ssz.domain.models.value import Record, Value, describe

__all__ = [
    "compute_id",
    "content_hash",
    "decode",
    "describe",
    "encode",
    "reset_services",
]


@lru_cache(maxsize=1)
def _services() -> tuple[SszCodecService, MerkleHasherService, IdentityService]:
    config = CodecConfig.from_environment()
    codec = SszCodecService(config)
    hasher = MerkleHasherService(config, codec=codec)
    return codec, hasher, IdentityService(config, hasher=hasher)


def reset_services() -> None:
    """Drop the shared services so the next call re-reads the environment."""
    _services.cache_clear()


def encode(value: Value, schema: Schema | None = None) -> bytes:
    """Encode ``value`` canonically. See SszCodecService.encode."""
    return _services()[0].encode(value, schema)


def decode(
    data: bytes | bytearray | memoryview,
    schema: Schema,
    strictness: Strictness | None = None,
) -> Value:
    """Decode ``data`` as ``schema``. See SszCodecService.decode."""
    return _services()[0].decode(data, schema, strictness)


def content_hash(
    data: bytes | bytearray | memoryview | Value, schema: Schema | None = None
) -> ContentHash:
    """Content hash of a value or encoding. See MerkleHasherService.content_hash."""
    return _services()[1].content_hash(data, schema)


def compute_id(record: Record, schema: RecordSchema | None = None) -> ContentHash:
    """Content ID of a record. See IdentityService.compute_id."""
    return _services()[2].compute_id(record, schema)
