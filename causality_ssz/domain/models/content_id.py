"""Content identifiers (32-byte content hashes and their typed aliases).

A ContentHash is the hash-tree-root of a canonical encoding. The typed
aliases (ResourceId, ExpressionId, ...) carry the same 32 bytes but never
compare equal across types, so a resource ID cannot be passed where an
expression ID is expected.

Developer Golden Rules:
1. 32 BYTES - Every ID is exactly 32 bytes; anything else is InvalidInput
2. OPAQUE - No subset of the bytes carries structural meaning
3. DERIVED - Typed IDs come from the identity service, not from callers

Usage:
    resource_id = identity_service.compute_resource_id(record)
    resource_id.hex()           # 64-char lowercase hex
    ResourceId.from_hex(text)   # round-trips hex()
    resource_id.to_value()      # embeddable fixed 32-byte Product
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import TypeVar

from causality_ssz.domain.errors.input import InvalidInputError
from causality_ssz.domain.models.schema import IntSchema, ProductSchema
from causality_ssz.domain.models.value import Int, Product, Value

HASH_SIZE: int = 32

_WORDS = struct.Struct("<8I")

# Schema of an ID embedded in another value: eight little-endian u32 words
CONTENT_ID_SCHEMA = ProductSchema(tuple(IntSchema() for _ in range(8)))

_IdT = TypeVar("_IdT", bound="ContentHash")


@dataclass(frozen=True)
class ContentHash:
    """A 32-byte hash-tree-root of a canonical encoding.

    Attributes:
        digest: The raw 32 bytes.
    """

    digest: bytes

    def __post_init__(self) -> None:
        if isinstance(self.digest, (bytearray, memoryview)):
            object.__setattr__(self, "digest", bytes(self.digest))
        if not isinstance(self.digest, bytes):
            raise InvalidInputError(
                f"{type(self).__name__} digest must be bytes, "
                f"got {type(self.digest).__name__}",
                field="digest",
            )
        if len(self.digest) != HASH_SIZE:
            raise InvalidInputError(
                f"{type(self).__name__} must be exactly {HASH_SIZE} bytes, "
                f"got {len(self.digest)}",
                field="digest",
            )

    @classmethod
    def null(cls: type[_IdT]) -> _IdT:
        """Return the all-zero ID."""
        return cls(bytes(HASH_SIZE))

    @classmethod
    def from_hex(cls: type[_IdT], text: str) -> _IdT:
        """Parse a 64-character hex string.

        Raises:
            InvalidInputError: If ``text`` is not hex or not 32 bytes long.
        """
        try:
            raw = bytes.fromhex(text)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(
                f"Invalid hex for {cls.__name__}: {text!r}", field="digest"
            ) from exc
        return cls(raw)

    @classmethod
    def from_value(cls: type[_IdT], value: Value) -> _IdT:
        """Recover an ID embedded with ``to_value()``.

        Raises:
            InvalidInputError: If ``value`` is not a product of eight Ints.
        """
        if not isinstance(value, Product) or len(value.elements) != 8:
            raise InvalidInputError(
                f"{cls.__name__} value must be a product of eight Ints",
                field="value",
            )
        words = []
        for element in value.elements:
            if not isinstance(element, Int):
                raise InvalidInputError(
                    f"{cls.__name__} value must be a product of eight Ints",
                    field="value",
                )
            words.append(element.value)
        return cls(_WORDS.pack(*words))

    def hex(self) -> str:
        return self.digest.hex()

    def is_null(self) -> bool:
        return self.digest == bytes(HASH_SIZE)

    def to_value(self) -> Product:
        """Embed the ID in a value as a fixed 32-byte product.

        The product's canonical encoding is byte-identical to ``digest``.
        """
        return Product(tuple(Int(word) for word in _WORDS.unpack(self.digest)))

    def __bytes__(self) -> bytes:
        return self.digest

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.hex()})"


class ResourceId(ContentHash):
    """Identifier of a resource descriptor record."""


class ExpressionId(ContentHash):
    """Identifier of an expression term record."""


class IntentId(ContentHash):
    """Identifier of an intent record."""


class EffectId(ContentHash):
    """Identifier of an effect record."""


class DomainId(ContentHash):
    """Identifier of a domain record."""
