"""Unit tests for the value model.

Tests construction validation, structural equality, variant_of and
describe().
"""

import pytest

from causality_ssz.domain.errors import InvalidInputError
from causality_ssz.domain.exceptions import ErrorKind
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
    ValueKind,
    describe,
    variant_of,
)


class TestScalarConstruction:
    """Tests for Unit, Bool and Int construction."""

    def test_int_accepts_u32_bounds(self) -> None:
        assert Int(0).value == 0
        assert Int(U32_MAX).value == U32_MAX

    @pytest.mark.parametrize("bad", [-1, U32_MAX + 1, 2**64])
    def test_int_rejects_out_of_range(self, bad: int) -> None:
        with pytest.raises(InvalidInputError, match="must be in"):
            Int(bad)

    def test_int_rejects_bool(self) -> None:
        """bool is an int subclass but must not become an Int."""
        with pytest.raises(InvalidInputError):
            Int(True)

    def test_int_rejects_float(self) -> None:
        with pytest.raises(InvalidInputError):
            Int(1.0)  # type: ignore[arg-type]

    def test_bool_rejects_int(self) -> None:
        with pytest.raises(InvalidInputError, match="must be a bool"):
            Bool(1)  # type: ignore[arg-type]

    def test_unit_instances_are_equal(self) -> None:
        assert Unit() == Unit()
        assert hash(Unit()) == hash(Unit())


class TestTextConstruction:
    """Tests for Symbol and String construction."""

    def test_string_from_str(self) -> None:
        assert String("héllo").value == "héllo"

    def test_string_from_utf8_bytes(self) -> None:
        assert String("héllo".encode("utf-8")) == String("héllo")

    def test_symbol_from_bytearray(self) -> None:
        assert Symbol(bytearray(b"transfer")) == Symbol("transfer")

    def test_invalid_utf8_bytes_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="not valid UTF-8"):
            String(b"\xff\xfe")

    def test_lone_surrogate_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="cannot be encoded"):
            Symbol("\ud800")

    def test_non_text_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            String(42)  # type: ignore[arg-type]

    def test_utf8_returns_encoded_bytes(self) -> None:
        assert String("ü").utf8() == b"\xc3\xbc"


class TestContainerConstruction:
    """Tests for Product, Sum and Record construction."""

    def test_product_of_keeps_order(self) -> None:
        product = Product.of(Int(1), String("a"))
        assert product.elements == (Int(1), String("a"))
        assert len(product) == 2

    def test_product_accepts_list(self) -> None:
        assert Product([Int(1)]) == Product.of(Int(1))

    def test_product_rejects_non_values(self) -> None:
        with pytest.raises(InvalidInputError, match=r"elements\[1\]"):
            Product((Int(1), 2))  # type: ignore[arg-type]

    def test_empty_product_allowed(self) -> None:
        assert Product(()) == Product.of()

    def test_sum_validates_tag(self) -> None:
        with pytest.raises(InvalidInputError):
            Sum(-1, Unit())

    def test_sum_validates_payload(self) -> None:
        with pytest.raises(InvalidInputError, match="payload"):
            Sum(0, "x")  # type: ignore[arg-type]

    def test_record_of_keeps_keyword_order(self) -> None:
        record = Record.of(b=Int(2), a=Int(1))
        assert record.field_names() == ("b", "a")

    def test_record_duplicate_field_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="Duplicate") as exc_info:
            Record((("a", Int(1)), ("a", Int(2))))
        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        assert exc_info.value.field == "a"

    def test_record_empty_field_name_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="non-empty"):
            Record((("", Int(1)),))

    def test_record_malformed_pair_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="pair"):
            Record((("a",),))  # type: ignore[arg-type]

    def test_record_get(self) -> None:
        record = Record.of(quantity=Int(100))
        assert record.get("quantity") == Int(100)
        with pytest.raises(KeyError):
            record.get("missing")


class TestEquality:
    """Tests for structural equality."""

    def test_nested_structural_equality(self) -> None:
        left = Record.of(x=Product.of(Sum(1, String("a")), Bool(True)))
        right = Record.of(x=Product.of(Sum(1, String("a")), Bool(True)))
        assert left == right
        assert hash(left) == hash(right)

    def test_variants_with_same_payload_differ(self) -> None:
        assert Symbol("a") != String("a")
        assert Bool(True) != Int(1)

    def test_record_field_order_matters(self) -> None:
        assert Record.of(a=Int(1), b=Int(2)) != Record.of(b=Int(2), a=Int(1))

    def test_values_are_immutable(self) -> None:
        value = Int(1)
        with pytest.raises(AttributeError):
            value.value = 2  # type: ignore[misc]


class TestVariantOf:
    """Tests for variant_of()."""

    @pytest.mark.parametrize(
        ("value", "kind"),
        [
            (Unit(), ValueKind.UNIT),
            (Bool(False), ValueKind.BOOL),
            (Int(3), ValueKind.INT),
            (Symbol("s"), ValueKind.SYMBOL),
            (String("s"), ValueKind.STRING),
            (Product.of(), ValueKind.PRODUCT),
            (Sum(0, Unit()), ValueKind.SUM),
            (Record.of(a=Unit()), ValueKind.RECORD),
        ],
    )
    def test_variant_of(self, value, kind: ValueKind) -> None:
        assert variant_of(value) == kind

    def test_variant_of_non_value(self) -> None:
        with pytest.raises(InvalidInputError):
            variant_of("not a value")  # type: ignore[arg-type]


class TestDescribe:
    """Tests for describe()."""

    def test_describe_token_record(self) -> None:
        record = Record.of(type=String("token"), quantity=Int(100))
        assert describe(record) == 'record{type: "token", quantity: 100}'

    def test_describe_nested(self) -> None:
        value = Product.of(Unit(), Bool(True), Sum(2, Symbol("ok")))
        assert describe(value) == "(unit, true, #2<'ok>)"

    def test_describe_escapes_quotes(self) -> None:
        assert describe(String('say "hi"')) == '"say \\"hi\\""'
