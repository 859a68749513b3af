# File: /tests/test_values.py | Version: 1.0 | Title: Cell Value model (coercion, textualization, ordering)
import math

from gridbase.query.values import (
    NULL,
    FieldType,
    Value,
    ValueKind,
    coerce,
    compare,
    fold,
    format_number,
    from_storage,
    is_empty,
    parse_number,
    storage_columns,
    textualize,
    to_json,
    to_number,
)


def test_coerce_keeps_text_and_finite_numbers():
    assert coerce("abc") == Value.of_text("abc")
    assert coerce(3) == Value.of_number(3.0)
    assert coerce(2.5).number == 2.5


def test_coerce_everything_else_is_null():
    for raw in (None, True, False, math.nan, math.inf, [1], {"a": 1}):
        assert coerce(raw) is NULL or coerce(raw).is_null


def test_parse_number_rejects_partial_input():
    assert parse_number(" 42 ") == 42.0
    assert parse_number("-1.5") == -1.5
    assert parse_number("12abc") is None
    assert parse_number("") is None
    assert parse_number("nan") is None
    assert parse_number(None) is None


def test_textualize_and_format_number():
    assert textualize(Value.of_number(30)) == "30"
    assert textualize(Value.of_number(2.5)) == "2.5"
    assert textualize(NULL) == ""
    assert format_number(-0.0) == "0"


def test_to_number_defaults_unparseable_to_zero():
    assert to_number(Value.of_text("7")) == 7.0
    assert to_number(Value.of_text("seven")) == 0.0
    assert to_number(NULL) == 0.0


def test_compare_uses_field_type():
    ten, nine = Value.of_text("10"), Value.of_text("9")
    # text order is by code point, number order by magnitude
    assert compare(ten, nine, FieldType.text) == -1
    assert compare(ten, nine, FieldType.number) == 1
    assert compare(NULL, Value.of_text(""), FieldType.text) == 0
    assert compare(NULL, Value.of_number(-1), "number") == 1


def test_is_empty_covers_null_and_empty_text():
    assert is_empty(NULL)
    assert is_empty(Value.of_text(""))
    assert not is_empty(Value.of_text(" "))
    assert not is_empty(Value.of_number(0))


def test_to_json_renders_integral_numbers_as_int():
    assert to_json(Value.of_number(3.0)) == 3
    assert isinstance(to_json(Value.of_number(3.0)), int)
    assert to_json(Value.of_number(0.25)) == 0.25
    assert to_json(NULL) is None


def test_storage_columns_denormalize_text_and_number():
    cols = storage_columns(Value.of_text("15"))
    assert cols == {"value_type": "text", "text_value": "15", "number_value": 15.0, "folded_value": "15"}

    cols = storage_columns(Value.of_number(4))
    assert cols == {"value_type": "number", "text_value": "4", "number_value": 4.0, "folded_value": "4"}

    cols = storage_columns(NULL)
    assert cols["value_type"] == ValueKind.null.value
    assert cols["text_value"] is None and cols["number_value"] is None
    assert cols["folded_value"] is None

    assert from_storage("text", "abc", None) == Value.of_text("abc")
    assert from_storage("number", "4", 4.0) == Value.of_number(4)
    assert from_storage("null", None, None) is NULL


def test_folded_column_uses_full_casefold():
    assert storage_columns(Value.of_text("Élan"))["folded_value"] == "élan"
    assert storage_columns(Value.of_text("Straße"))["folded_value"] == "strasse"
    assert fold("ÉCOLE") == fold("école")
