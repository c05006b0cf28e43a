"""SSZ codec service: canonical encode and schema-directed decode.

Layout rules:
- Unit, Bool and Int are written verbatim: 0, 1 and 4 little-endian bytes.
- Symbol and String are raw UTF-8 with no length prefix. Their length is
  recovered from the enclosing container's offsets, or from the buffer
  length at top level.
- Sum is a 4-byte little-endian tag followed by the payload encoding.
- Product and Record are containers split into a fixed zone and a
  variable zone. Fixed-size elements are written inline in the fixed zone;
  each variable-size element gets a 4-byte offset slot there (measured
  from the start of the container) and its bytes are appended to the
  variable zone in element order.

Decoding is told the expected shape through a Schema. It reads the fixed
zone, validates the offsets (in range, non-decreasing, not past the end),
then slices the variable zone between consecutive offsets.

Usage:
    codec = SszCodecService()
    data = codec.encode(Record.of(type=String("token"), quantity=Int(100)))
    value = codec.decode(data, RecordSchema.of(type=StringSchema(), quantity=IntSchema()))
"""

from __future__ import annotations

import struct

from causality_ssz.application.services.base import LoggingMixin
from causality_ssz.config.codec_config import DEFAULT_CODEC_CONFIG, CodecConfig
from causality_ssz.domain.errors.codec import DeserializationError, SerializationError
from causality_ssz.domain.errors.input import InvalidInputError
from causality_ssz.domain.models.codec_options import Strictness
from causality_ssz.domain.models.schema import (
    OFFSET_SIZE,
    SUM_TAG_SIZE,
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
)

_U32 = struct.Struct("<I")

ROOT_PATH: str = "$"


class SszCodecService(LoggingMixin):
    """Canonical SSZ encoder and decoder for the value union.

    Stateless apart from its configuration; safe to share between threads.

    Attributes:
        config: Depth limit and default strictness.
    """

    def __init__(self, config: CodecConfig | None = None) -> None:
        """Initialize the codec.

        Args:
            config: Codec configuration. Defaults to DEFAULT_CODEC_CONFIG.
        """
        self.config = config or DEFAULT_CODEC_CONFIG
        self._init_logger()

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode(self, value: Value, schema: Schema | None = None) -> bytes:
        """Encode a value to its canonical SSZ bytes.

        Args:
            value: The value to encode.
            schema: Optional shape the value must conform to. When given,
                any variant, arity, field-name or sum-arm mismatch fails.

        Returns:
            Freshly allocated, caller-owned encoding.

        Raises:
            SerializationError: If the value violates an encoding invariant
                or does not conform to ``schema``.
        """
        encoded, _ = self.encode_sized(value, schema)
        return encoded

    def encode_sized(
        self, value: Value, schema: Schema | None = None
    ) -> tuple[bytes, bool]:
        """Encode a value and report whether it is fixed-size.

        The size class is the one ``is_fixed_size()`` reports for any schema
        the value conforms to.

        Returns:
            Tuple of (encoding, is_fixed_size).

        Raises:
            SerializationError: As for encode().
        """
        log = self._log_operation("encode", variant=getattr(value, "kind", None))
        try:
            if not isinstance(value, Value):
                raise SerializationError(
                    ROOT_PATH, f"expected a Value, got {type(value).__name__}"
                )
            if schema is not None and not isinstance(schema, Schema):
                raise SerializationError(
                    ROOT_PATH, f"expected a Schema, got {type(schema).__name__}"
                )
            encoded, fixed = self._encode(value, schema, ROOT_PATH, 0)
        except SerializationError as exc:
            log.warning("encode_failed", path=exc.path, reason=exc.reason)
            raise
        log.debug("encode_completed", length=len(encoded), fixed_size=fixed)
        return encoded, fixed

    def _encode(
        self, value: Value, schema: Schema | None, path: str, depth: int
    ) -> tuple[bytes, bool]:
        if depth > self.config.max_depth:
            raise SerializationError(
                path, f"nesting exceeds max depth {self.config.max_depth}"
            )
        if schema is not None and schema.kind != value.kind:
            raise SerializationError(
                path, f"expected {schema.kind}, got {value.kind}"
            )

        if isinstance(value, Unit):
            return b"", True
        if isinstance(value, Bool):
            return (b"\x01" if value.value else b"\x00"), True
        if isinstance(value, Int):
            return _U32.pack(value.value), True
        if isinstance(value, (Symbol, String)):
            return value.utf8(), False
        if isinstance(value, Sum):
            return self._encode_sum(value, schema, path, depth), False
        if isinstance(value, Product):
            return self._encode_product(value, schema, path, depth)
        if isinstance(value, Record):
            return self._encode_record(value, schema, path, depth)
        raise SerializationError(path, f"unknown value type {type(value).__name__}")

    def _encode_sum(
        self, value: Sum, schema: Schema | None, path: str, depth: int
    ) -> bytes:
        arm: Schema | None = None
        if isinstance(schema, SumSchema):
            arm = schema.arm(value.tag)
            if arm is None:
                raise SerializationError(
                    path,
                    f"sum tag {value.tag} outside the {len(schema.arms)} declared arms",
                )
        payload, _ = self._encode(value.payload, arm, f"{path}#{value.tag}", depth + 1)
        return _U32.pack(value.tag) + payload

    def _encode_product(
        self, value: Product, schema: Schema | None, path: str, depth: int
    ) -> tuple[bytes, bool]:
        element_schemas: tuple[Schema | None, ...] = (None,) * len(value.elements)
        if isinstance(schema, ProductSchema):
            if len(schema.elements) != len(value.elements):
                raise SerializationError(
                    path,
                    f"product arity {len(value.elements)} does not match "
                    f"declared arity {len(schema.elements)}",
                )
            element_schemas = schema.elements
        children = [
            (f"{path}[{index}]", element, element_schemas[index])
            for index, element in enumerate(value.elements)
        ]
        return self._encode_container(children, path, depth)

    def _encode_record(
        self, value: Record, schema: Schema | None, path: str, depth: int
    ) -> tuple[bytes, bool]:
        field_schemas: tuple[Schema | None, ...] = (None,) * len(value.fields)
        if isinstance(schema, RecordSchema):
            if len(schema.fields) != len(value.fields):
                raise SerializationError(
                    path,
                    f"record has {len(value.fields)} fields, "
                    f"schema declares {len(schema.fields)}",
                )
            for (name, _), (declared, _) in zip(value.fields, schema.fields):
                if name != declared:
                    raise SerializationError(
                        f"{path}.{name}",
                        f"field {name!r} found where schema declares {declared!r}",
                    )
            field_schemas = tuple(field_schema for _, field_schema in schema.fields)
        children = [
            (f"{path}.{name}", field, field_schemas[index])
            for index, (name, field) in enumerate(value.fields)
        ]
        return self._encode_container(children, path, depth)

    def _encode_container(
        self,
        children: list[tuple[str, Value, Schema | None]],
        path: str,
        depth: int,
    ) -> tuple[bytes, bool]:
        # None marks an offset slot in the fixed zone
        fixed_zone: list[bytes | None] = []
        variable_zone: list[bytes] = []
        for child_path, child, child_schema in children:
            encoded, fixed = self._encode(child, child_schema, child_path, depth + 1)
            if fixed:
                fixed_zone.append(encoded)
            else:
                fixed_zone.append(None)
                variable_zone.append(encoded)

        fixed_length = sum(
            OFFSET_SIZE if part is None else len(part) for part in fixed_zone
        )
        total_length = fixed_length + sum(len(part) for part in variable_zone)
        if variable_zone and total_length > U32_MAX:
            raise SerializationError(
                path, f"container of {total_length} bytes exceeds the u32 offset range"
            )

        out = bytearray()
        offset = fixed_length
        pending = iter(variable_zone)
        for part in fixed_zone:
            if part is None:
                out += _U32.pack(offset)
                offset += len(next(pending))
            else:
                out += part
        for part in variable_zone:
            out += part
        return bytes(out), not variable_zone

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode(
        self,
        data: bytes | bytearray | memoryview,
        schema: Schema,
        strictness: Strictness | None = None,
    ) -> Value:
        """Decode SSZ bytes into a value of the given shape.

        Args:
            data: The encoded buffer. It is not retained.
            schema: The shape the buffer is expected to hold.
            strictness: STRICT rejects bytes the schema does not account
                for; LENIENT ignores them. Defaults to the configured
                default_strictness.

        Returns:
            The decoded value.

        Raises:
            InvalidInputError: If ``data`` is not bytes-like or ``schema``
                is not a Schema.
            DeserializationError: If the buffer fails structural validation.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise InvalidInputError(
                f"data must be bytes-like, got {type(data).__name__}", field="data"
            )
        if not isinstance(schema, Schema):
            raise InvalidInputError(
                f"schema must be a Schema, got {type(schema).__name__}", field="schema"
            )
        mode = Strictness(strictness or self.config.default_strictness)
        buffer = memoryview(bytes(data))
        log = self._log_operation(
            "decode", variant=schema.kind, length=len(buffer), strictness=mode
        )
        try:
            value = self._decode(
                buffer, schema, ROOT_PATH, 0, mode == Strictness.STRICT
            )
        except DeserializationError as exc:
            log.warning(
                "decode_failed", path=exc.path, reason=exc.reason, offset=exc.offset
            )
            raise
        log.debug("decode_completed")
        return value

    def _decode(
        self, view: memoryview, schema: Schema, path: str, depth: int, strict: bool
    ) -> Value:
        if depth > self.config.max_depth:
            raise DeserializationError(
                path, f"nesting exceeds max depth {self.config.max_depth}"
            )

        if schema.is_fixed_size():
            size = schema.fixed_size()
            if len(view) < size:
                raise DeserializationError(
                    path, f"need {size} bytes, buffer has {len(view)}"
                )
            if strict and len(view) > size:
                raise DeserializationError(
                    path,
                    f"{len(view) - size} trailing bytes after fixed-size value",
                    offset=size,
                )
            view = view[:size]

        if isinstance(schema, UnitSchema):
            return Unit()
        if isinstance(schema, BoolSchema):
            if view[0] > 1:
                raise DeserializationError(
                    path, f"invalid bool byte 0x{view[0]:02x}", offset=0
                )
            return Bool(view[0] == 1)
        if isinstance(schema, IntSchema):
            return Int(_U32.unpack(view)[0])
        if isinstance(schema, SymbolSchema):
            return Symbol(self._decode_text(view, path))
        if isinstance(schema, StringSchema):
            return String(self._decode_text(view, path))
        if isinstance(schema, SumSchema):
            return self._decode_sum(view, schema, path, depth, strict)
        if isinstance(schema, ProductSchema):
            elements = self._decode_container(
                view,
                [
                    (f"{path}[{index}]", element)
                    for index, element in enumerate(schema.elements)
                ],
                path,
                depth,
                strict,
            )
            return Product(tuple(elements))
        if isinstance(schema, RecordSchema):
            values = self._decode_container(
                view,
                [(f"{path}.{name}", field) for name, field in schema.fields],
                path,
                depth,
                strict,
            )
            return Record(tuple(zip(schema.field_names(), values)))
        raise DeserializationError(path, f"unknown schema type {type(schema).__name__}")

    @staticmethod
    def _decode_text(view: memoryview, path: str) -> str:
        try:
            return bytes(view).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DeserializationError(
                path, f"invalid UTF-8: {exc.reason}", offset=exc.start
            ) from exc

    def _decode_sum(
        self, view: memoryview, schema: SumSchema, path: str, depth: int, strict: bool
    ) -> Sum:
        if len(view) < SUM_TAG_SIZE:
            raise DeserializationError(
                path, f"need {SUM_TAG_SIZE} bytes for sum tag, buffer has {len(view)}"
            )
        tag = _U32.unpack_from(view, 0)[0]
        arm = schema.arm(tag)
        if arm is None:
            raise DeserializationError(
                path,
                f"sum tag {tag} matches none of the {len(schema.arms)} arms",
                offset=0,
            )
        payload = self._decode(
            view[SUM_TAG_SIZE:], arm, f"{path}#{tag}", depth + 1, strict
        )
        return Sum(tag, payload)

    def _decode_container(
        self,
        view: memoryview,
        children: list[tuple[str, Schema]],
        path: str,
        depth: int,
        strict: bool,
    ) -> list[Value]:
        fixed_length = sum(child.zone_size() for _, child in children)
        if len(view) < fixed_length:
            raise DeserializationError(
                path,
                f"buffer of {len(view)} bytes is shorter than the "
                f"{fixed_length}-byte fixed zone",
            )

        slices: list[memoryview] = []
        # (child index, offset value, slot position) for each variable child
        offsets: list[tuple[int, int, int]] = []
        position = 0
        for index, (_, child) in enumerate(children):
            if child.is_fixed_size():
                size = child.fixed_size()
                slices.append(view[position : position + size])
            else:
                offsets.append((index, _U32.unpack_from(view, position)[0], position))
                slices.append(view[0:0])
            position += child.zone_size()

        if offsets:
            first = offsets[0][1]
            if first < fixed_length:
                raise DeserializationError(
                    children[offsets[0][0]][0],
                    f"offset {first} points into the {fixed_length}-byte fixed zone",
                    offset=offsets[0][2],
                )
            if strict and first != fixed_length:
                raise DeserializationError(
                    path,
                    f"{first - fixed_length} unconsumed bytes between fixed zone "
                    "and variable zone",
                    offset=fixed_length,
                )
            previous = first
            for index, offset, slot in offsets:
                if offset > len(view):
                    raise DeserializationError(
                        children[index][0],
                        f"offset {offset} points past buffer end {len(view)}",
                        offset=slot,
                    )
                if offset < previous:
                    raise DeserializationError(
                        children[index][0],
                        f"offset {offset} decreases from previous offset {previous}",
                        offset=slot,
                    )
                previous = offset
            ends = [offset for _, offset, _ in offsets[1:]] + [len(view)]
            for (index, offset, _), end in zip(offsets, ends):
                slices[index] = view[offset:end]

        values: list[Value] = []
        for (child_path, child), part in zip(children, slices):
            values.append(self._decode(part, child, child_path, depth + 1, strict))
        return values
