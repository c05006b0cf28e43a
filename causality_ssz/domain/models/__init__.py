"""Domain models for causality-ssz.

Contains the value union, the schema union that describes it, and the
32-byte content identifiers. These models are immutable and contain no
infrastructure dependencies.
"""

from causality_ssz.domain.models.codec_options import HashAlgorithm, Strictness
from causality_ssz.domain.models.content_id import (
    CONTENT_ID_SCHEMA,
    HASH_SIZE,
    ContentHash,
    DomainId,
    EffectId,
    ExpressionId,
    IntentId,
    ResourceId,
)
from causality_ssz.domain.models.schema import (
    BoolSchema,
    IntSchema,
    ProductSchema,
    RecordSchema,
    Schema,
    StringSchema,
    SumSchema,
    SymbolSchema,
    UnitSchema,
)
from causality_ssz.domain.models.value import (
    U32_MAX,
    Bool,
    Int,
    Product,
    Record,
    String,
    Sum,
    Symbol,
    Unit,
    Value,
    ValueKind,
    describe,
    variant_of,
)

__all__: list[str] = [
    "CONTENT_ID_SCHEMA",
    "HASH_SIZE",
    "U32_MAX",
    "Bool",
    "BoolSchema",
    "ContentHash",
    "DomainId",
    "EffectId",
    "ExpressionId",
    "HashAlgorithm",
    "Int",
    "IntSchema",
    "IntentId",
    "Product",
    "ProductSchema",
    "Record",
    "RecordSchema",
    "ResourceId",
    "Schema",
    "Strictness",
    "String",
    "StringSchema",
    "Sum",
    "SumSchema",
    "Symbol",
    "SymbolSchema",
    "Unit",
    "UnitSchema",
    "Value",
    "ValueKind",
    "describe",
    "variant_of",
]
