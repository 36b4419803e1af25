"""Unit tests for utils/coercion.py."""

from datetime import datetime

import pytest

from utils.coercion import (
    FieldKind,
    FieldSpec,
    coerce,
    coerce_boolean,
    coerce_float,
    coerce_integer,
    coerce_string_array,
    coerce_timestamp,
    missing_required,
    normalize_null,
)


@pytest.mark.parametrize("value", [None, "", "   ", "NULL", "undefined"])
def test_null_tokens_become_none(value):
    assert normalize_null(value) is None


def test_other_values_are_kept():
    assert normalize_null("null-ish") == "null-ish"
    assert normalize_null(0) == 0
    assert normalize_null(False) is False


class TestNumbers:

    def test_integer_from_string(self):
        assert coerce_integer("42") == 42
        assert coerce_integer(" 1,204 ") == 1204

    def test_integer_from_spreadsheet_float(self):
        assert coerce_integer("12.0") == 12
        assert coerce_integer(7.0) == 7

    def test_integer_rejects_fractions_and_garbage(self):
        assert coerce_integer("12.5") is None
        assert coerce_integer("abc") is None
        assert coerce_integer("NULL") is None

    def test_integer_out_of_column_range(self):
        assert coerce_integer("100000000000000000000") is None
        assert coerce_integer("1e30") is None
        assert coerce_integer(2 ** 31) is None
        assert coerce_integer(2 ** 31 - 1) == 2147483647
        assert coerce_integer(-(2 ** 31)) == -2147483648

    def test_booleans_are_not_numbers(self):
        assert coerce_integer(True) is None
        assert coerce_float(False) is None

    def test_float(self):
        assert coerce_float("19.99") == pytest.approx(19.99)
        assert coerce_float(3) == 3.0
        assert coerce_float("undefined") is None
        assert coerce_float("nan") is None


class TestBoolean:

    @pytest.mark.parametrize("value", ["Y", "true", "True", "TRUE", " true ", True])
    def test_truthy(self, value):
        assert coerce_boolean(value) is True

    @pytest.mark.parametrize("value", ["N", "false", "yes", "1", "", None, 1, False])
    def test_everything_else_is_false(self, value):
        assert coerce_boolean(value) is False


class TestTimestamp:

    def test_iso_string(self):
        assert coerce_timestamp("2024-03-01T10:30:00") == datetime(2024, 3, 1, 10, 30)

    def test_datetime_passes_through(self):
        value = datetime(2023, 1, 2, 3, 4, 5)
        assert coerce_timestamp(value) is value

    def test_unparsable_is_none(self):
        assert coerce_timestamp("not a date") is None
        assert coerce_timestamp("") is None


def test_string_array():
    assert coerce_string_array(["a", "", None, "b"]) == ["a", "b"]
    assert coerce_string_array("a, b ,c") == ["a", "b", "c"]
    assert coerce_string_array(None) == []
    assert coerce_string_array("NULL") == []


def test_coerce_keeps_only_declared_fields():
    schema = (
        FieldSpec("product_id", FieldKind.STRING, required=True),
        FieldSpec("price_usd", FieldKind.FLOAT),
        FieldSpec("ad", FieldKind.BOOLEAN),
    )
    row = coerce({"product_id": 123, "price_usd": "9.50", "unknown": "x"}, schema)
    assert row == {"product_id": "123", "price_usd": 9.5, "ad": False}


def test_missing_required():
    schema = (
        FieldSpec("product_id", FieldKind.STRING, required=True),
        FieldSpec("product_title", FieldKind.STRING, required=True),
        FieldSpec("brand", FieldKind.STRING),
    )
    row = coerce({"product_id": "NULL", "product_title": "Mug"}, schema)
    assert missing_required(row, schema) == ["product_id"]
