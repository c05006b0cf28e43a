"""Schema model: the shape hint the decoder is told to expect.

SSZ buffers are not self-describing. Apart from the tag inside a Sum,
nothing in the bytes says which arm of the value union they hold, so the
caller passes a schema mirroring the value it expects back.

Size rules:
- Unit, Bool and Int are fixed-size (0, 1 and 4 bytes).
- Symbol and String are variable-size.
- Sum is always variable-size, since its arms may differ in size.
- Product and Record are fixed-size exactly when every element is, and
  their fixed size is then the sum of the element sizes.

Usage:
    token_schema = RecordSchema.of(
        type=StringSchema(),
        quantity=IntSchema(),
    )
    token_schema.is_fixed_size()  # False
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from causality_ssz.domain.errors.input import InvalidInputError
from causality_ssz.domain.models.value import ValueKind

BOOL_SIZE: int = 1
INT_SIZE: int = 4
OFFSET_SIZE: int = 4
SUM_TAG_SIZE: int = 4


def _check_schema(schema: object, field: str) -> Schema:
    if not isinstance(schema, Schema):
        raise InvalidInputError(
            f"{field} must be a Schema, got {type(schema).__name__}", field=field
        )
    return schema


@dataclass(frozen=True)
class Schema:
    """Base of the schema union. Never instantiated directly."""

    @property
    def kind(self) -> ValueKind:
        raise NotImplementedError

    def is_fixed_size(self) -> bool:
        return False

    def fixed_size(self) -> int:
        """Encoded size in bytes of any value of this fixed-size schema.

        Raises:
            InvalidInputError: If the schema is variable-size.
        """
        raise InvalidInputError(f"{self.kind} schema is variable-size")

    def zone_size(self) -> int:
        """Bytes this schema occupies in an enclosing container's fixed zone."""
        return self.fixed_size() if self.is_fixed_size() else OFFSET_SIZE


@dataclass(frozen=True)
class UnitSchema(Schema):
    @property
    def kind(self) -> ValueKind:
        return ValueKind.UNIT

    def is_fixed_size(self) -> bool:
        return True

    def fixed_size(self) -> int:
        return 0


@dataclass(frozen=True)
class BoolSchema(Schema):
    @property
    def kind(self) -> ValueKind:
        return ValueKind.BOOL

    def is_fixed_size(self) -> bool:
        return True

    def fixed_size(self) -> int:
        return BOOL_SIZE


@dataclass(frozen=True)
class IntSchema(Schema):
    @property
    def kind(self) -> ValueKind:
        return ValueKind.INT

    def is_fixed_size(self) -> bool:
        return True

    def fixed_size(self) -> int:
        return INT_SIZE


@dataclass(frozen=True)
class SymbolSchema(Schema):
    @property
    def kind(self) -> ValueKind:
        return ValueKind.SYMBOL


@dataclass(frozen=True)
class StringSchema(Schema):
    @property
    def kind(self) -> ValueKind:
        return ValueKind.STRING


@dataclass(frozen=True)
class ProductSchema(Schema):
    """Schema for a fixed-arity product; one schema per element."""

    elements: tuple[Schema, ...]

    def __post_init__(self) -> None:
        if isinstance(self.elements, (str, bytes)) or not isinstance(
            self.elements, Iterable
        ):
            raise InvalidInputError(
                "ProductSchema elements must be an iterable of Schemas",
                field="elements",
            )
        elements = tuple(self.elements)
        for index, element in enumerate(elements):
            _check_schema(element, f"elements[{index}]")
        object.__setattr__(self, "elements", elements)

    @classmethod
    def of(cls, *elements: Schema) -> ProductSchema:
        return cls(elements)

    @property
    def kind(self) -> ValueKind:
        return ValueKind.PRODUCT

    def is_fixed_size(self) -> bool:
        return all(element.is_fixed_size() for element in self.elements)

    def fixed_size(self) -> int:
        if not self.is_fixed_size():
            return super().fixed_size()
        return sum(element.fixed_size() for element in self.elements)


@dataclass(frozen=True)
class SumSchema(Schema):
    """Schema for a tagged union; arm ``i`` is selected by tag ``i``."""

    arms: tuple[Schema, ...]

    def __post_init__(self) -> None:
        if isinstance(self.arms, (str, bytes)) or not isinstance(self.arms, Iterable):
            raise InvalidInputError(
                "SumSchema arms must be an iterable of Schemas", field="arms"
            )
        arms = tuple(self.arms)
        if not arms:
            raise InvalidInputError("SumSchema needs at least one arm", field="arms")
        for index, arm in enumerate(arms):
            _check_schema(arm, f"arms[{index}]")
        object.__setattr__(self, "arms", arms)

    @classmethod
    def of(cls, *arms: Schema) -> SumSchema:
        return cls(arms)

    @property
    def kind(self) -> ValueKind:
        return ValueKind.SUM

    def arm(self, tag: int) -> Schema | None:
        """Return the schema selected by ``tag``, or None if no arm matches."""
        if 0 <= tag < len(self.arms):
            return self.arms[tag]
        return None


@dataclass(frozen=True)
class RecordSchema(Schema):
    """Schema for a record; field names and order are part of the shape."""

    fields: tuple[tuple[str, Schema], ...]

    def __post_init__(self) -> None:
        if isinstance(self.fields, (str, bytes)) or not isinstance(
            self.fields, Iterable
        ):
            raise InvalidInputError(
                "RecordSchema fields must be an iterable of (name, Schema) pairs",
                field="fields",
            )
        fields: list[tuple[str, Schema]] = []
        seen: set[str] = set()
        for index, pair in enumerate(self.fields):
            try:
                name, schema = pair
            except (TypeError, ValueError) as exc:
                raise InvalidInputError(
                    f"fields[{index}] must be a (name, Schema) pair",
                    field=f"fields[{index}]",
                ) from exc
            if not isinstance(name, str) or not name:
                raise InvalidInputError(
                    f"fields[{index}] name must be a non-empty str",
                    field=f"fields[{index}]",
                )
            if name in seen:
                raise InvalidInputError(
                    f"Duplicate schema field name: {name!r}", field=name
                )
            seen.add(name)
            fields.append((name, _check_schema(schema, name)))
        object.__setattr__(self, "fields", tuple(fields))

    @classmethod
    def of(cls, **fields: Schema) -> RecordSchema:
        """Build a record schema from keyword arguments, keeping their order."""
        return cls(tuple(fields.items()))

    @property
    def kind(self) -> ValueKind:
        return ValueKind.RECORD

    def field_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    def is_fixed_size(self) -> bool:
        return all(schema.is_fixed_size() for _, schema in self.fields)

    def fixed_size(self) -> int:
        if not self.is_fixed_size():
            return super().fixed_size()
        return sum(schema.fixed_size() for _, schema in self.fields)
