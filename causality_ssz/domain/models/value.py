"""Value model: the closed tagged union the codec operates on.

Every value is one of eight arms. Each arm is a frozen dataclass carrying
only its payload; construction validates the payload and is the only
point at which a value is ever built. Equality is structural: same arm,
same payload, recursively.

Usage:
    token = Record.of(
        type=String("token"),
        quantity=Int(100),
    )
    variant_of(token)  # ValueKind.RECORD
    describe(token)    # 'record{type: "token", quantity: 100}'
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from causality_ssz.domain.errors.input import InvalidInputError

U32_MAX: int = 2**32 - 1


class ValueKind(StrEnum):
    """The arms of the value union."""

    UNIT = "unit"
    BOOL = "bool"
    INT = "int"
    SYMBOL = "symbol"
    STRING = "string"
    PRODUCT = "product"
    SUM = "sum"
    RECORD = "record"


def _check_u32(value: object, field: str) -> int:
    # bool is an int subclass; reject it so Bool and Int never blur
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidInputError(
            f"{field} must be an int, got {type(value).__name__}", field=field
        )
    if value < 0 or value > U32_MAX:
        raise InvalidInputError(
            f"{field} must be in [0, {U32_MAX}], got {value}", field=field
        )
    return value


def _check_text(value: object, field: str) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidInputError(
                f"{field} is not valid UTF-8: {exc.reason}", field=field
            ) from exc
    if not isinstance(value, str):
        raise InvalidInputError(
            f"{field} must be str or bytes, got {type(value).__name__}", field=field
        )
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidInputError(
            f"{field} cannot be encoded as UTF-8: {exc.reason}", field=field
        ) from exc
    return value


def _check_value(value: object, field: str) -> Value:
    if not isinstance(value, Value):
        raise InvalidInputError(
            f"{field} must be a Value, got {type(value).__name__}", field=field
        )
    return value


@dataclass(frozen=True)
class Value:
    """Base of the value union. Never instantiated directly."""

    @property
    def kind(self) -> ValueKind:
        raise NotImplementedError


@dataclass(frozen=True)
class Unit(Value):
    """The unit value. Encodes to zero bytes."""

    @property
    def kind(self) -> ValueKind:
        return ValueKind.UNIT


@dataclass(frozen=True)
class Bool(Value):
    """A boolean. Encodes to one byte, 0x00 or 0x01."""

    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise InvalidInputError(
                f"Bool payload must be a bool, got {type(self.value).__name__}",
                field="value",
            )

    @property
    def kind(self) -> ValueKind:
        return ValueKind.BOOL


@dataclass(frozen=True)
class Int(Value):
    """An unsigned 32-bit integer. Encodes to four little-endian bytes."""

    value: int

    def __post_init__(self) -> None:
        _check_u32(self.value, "value")

    @property
    def kind(self) -> ValueKind:
        return ValueKind.INT


@dataclass(frozen=True)
class Symbol(Value):
    """An interned name. Encodes to its raw UTF-8 bytes.

    Accepts ``str`` or UTF-8 ``bytes``; the payload is always stored as
    ``str``.
    """

    value: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _check_text(self.value, "value"))

    @property
    def kind(self) -> ValueKind:
        return ValueKind.SYMBOL

    def utf8(self) -> bytes:
        return self.value.encode("utf-8")


@dataclass(frozen=True)
class String(Value):
    """A text string. Encodes to its raw UTF-8 bytes.

    Accepts ``str`` or UTF-8 ``bytes``; the payload is always stored as
    ``str``.
    """

    value: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _check_text(self.value, "value"))

    @property
    def kind(self) -> ValueKind:
        return ValueKind.STRING

    def utf8(self) -> bytes:
        return self.value.encode("utf-8")


@dataclass(frozen=True)
class Product(Value):
    """An ordered, heterogeneous, fixed-arity sequence of values."""

    elements: tuple[Value, ...]

    def __post_init__(self) -> None:
        if isinstance(self.elements, (str, bytes)) or not isinstance(
            self.elements, Iterable
        ):
            raise InvalidInputError(
                "Product elements must be an iterable of Values", field="elements"
            )
        elements = tuple(self.elements)
        for index, element in enumerate(elements):
            _check_value(element, f"elements[{index}]")
        object.__setattr__(self, "elements", elements)

    @classmethod
    def of(cls, *elements: Value) -> Product:
        """Build a product from positional elements."""
        return cls(elements)

    @property
    def kind(self) -> ValueKind:
        return ValueKind.PRODUCT

    def __len__(self) -> int:
        return len(self.elements)


@dataclass(frozen=True)
class Sum(Value):
    """A tagged union value: the selected arm's tag and its payload."""

    tag: int
    payload: Value

    def __post_init__(self) -> None:
        _check_u32(self.tag, "tag")
        _check_value(self.payload, "payload")

    @property
    def kind(self) -> ValueKind:
        return ValueKind.SUM


@dataclass(frozen=True)
class Record(Value):
    """Ordered named fields. Field order is significant.

    Field names must be non-empty and unique within one record.
    """

    fields: tuple[tuple[str, Value], ...]

    def __post_init__(self) -> None:
        if isinstance(self.fields, (str, bytes)) or not isinstance(
            self.fields, Iterable
        ):
            raise InvalidInputError(
                "Record fields must be an iterable of (name, Value) pairs",
                field="fields",
            )
        fields: list[tuple[str, Value]] = []
        seen: set[str] = set()
        for index, pair in enumerate(self.fields):
            try:
                name, value = pair
            except (TypeError, ValueError) as exc:
                raise InvalidInputError(
                    f"fields[{index}] must be a (name, Value) pair",
                    field=f"fields[{index}]",
                ) from exc
            if not isinstance(name, str) or not name:
                raise InvalidInputError(
                    f"fields[{index}] name must be a non-empty str",
                    field=f"fields[{index}]",
                )
            if name in seen:
                raise InvalidInputError(
                    f"Duplicate record field name: {name!r}", field=name
                )
            seen.add(name)
            fields.append((name, _check_value(value, name)))
        object.__setattr__(self, "fields", tuple(fields))

    @classmethod
    def of(cls, **fields: Value) -> Record:
        """Build a record from keyword arguments, keeping their order."""
        return cls(tuple(fields.items()))

    @property
    def kind(self) -> ValueKind:
        return ValueKind.RECORD

    def field_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    def get(self, name: str) -> Value:
        """Return the value of field ``name``.

        Raises:
            KeyError: If the record has no such field.
        """
        for field_name, value in self.fields:
            if field_name == name:
                return value
        raise KeyError(name)

    def __len__(self) -> int:
        return len(self.fields)


def variant_of(value: Value) -> ValueKind:
    """Return which arm of the union ``value`` is.

    Raises:
        InvalidInputError: If ``value`` is not a Value.
    """
    return _check_value(value, "value").kind


def describe(value: Value) -> str:
    """Render a compact one-line description of a value for diagnostics."""
    if isinstance(value, Unit):
        return "unit"
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Int):
        return str(value.value)
    if isinstance(value, Symbol):
        return f"'{value.value}"
    if isinstance(value, String):
        escaped = value.value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, Product):
        return "(" + ", ".join(describe(e) for e in value.elements) + ")"
    if isinstance(value, Sum):
        return f"#{value.tag}<{describe(value.payload)}>"
    if isinstance(value, Record):
        body = ", ".join(f"{name}: {describe(v)}" for name, v in value.fields)
        return "record{" + body + "}"
    raise InvalidInputError(
        f"Cannot describe non-Value {type(value).__name__}", field="value"
    )
