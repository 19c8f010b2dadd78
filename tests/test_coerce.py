"""Tests for primitive coercers, number formats and shape validators."""

from __future__ import annotations

import pytest

from scene_script.coerce import (
    float32,
    strip_wrapper,
    to_bool,
    to_float,
    to_int,
    to_str,
    to_table,
    to_time,
)
from scene_script.config import DecoderOptions, NumberFormat, NumberFormatError
from scene_script.errors import TypeMismatch, UnexpectedShape, UnhandledField
from scene_script.shapes import expect_fields, expect_keys, expect_single_key
from scene_script.values import NIL, Boolean, Number, String, Table, from_python

FMT = NumberFormat()


# ---------------------------------------------------------------------------
# Floats and the fixed decimal separator
# ---------------------------------------------------------------------------


def test_float_from_number():
    assert to_float(Number(2.5), "p", FMT) == 2.5
    assert to_float(Number(3), "p", FMT) == 3.0


def test_float_from_text_uses_dot_separator():
    """Decimal parsing of "1.5" yields 1.5 whatever the host locale."""
    assert to_float(String("1.5"), "p", FMT) == 1.5


def test_float_text_with_comma_is_rejected_by_default():
    with pytest.raises(TypeMismatch):
        to_float(String("1,5"), "p", FMT)


def test_custom_separator_is_explicit():
    comma = NumberFormat(decimal_separator=",")
    assert comma.parse_float("1,5") == 1.5
    with pytest.raises(NumberFormatError):
        comma.parse_float("1.5")


def test_invalid_separator_rejected():
    with pytest.raises(ValueError):
        NumberFormat(decimal_separator="1")


def test_float_rounds_to_single_precision():
    assert to_float(Number(0.1), "p", FMT) == float32(0.1)
    assert to_float(Number(0.1), "p", FMT) != 0.1


@pytest.mark.parametrize("value", [String("fast"), String("nan"), Boolean(True), NIL])
def test_float_type_mismatch(value):
    with pytest.raises(TypeMismatch) as info:
        to_float(value, "actors.speed", FMT)
    assert info.value.path == "actors.speed"
    assert info.value.expected == "number"


# ---------------------------------------------------------------------------
# Integers and identifier wrappers
# ---------------------------------------------------------------------------


def test_int_from_number_and_text():
    assert to_int(Number(42), "p", FMT) == 42
    assert to_int(Number(42.0), "p", FMT) == 42
    assert to_int(String("-7"), "p", FMT) == -7


@pytest.mark.parametrize(
    "text,expected",
    [("cid(42)", 42), ("fid(7)", 7), ("gdi( 13 )", 13), ("iid(99)", 99), ("wid(1)", 1), ("cdiid(5)", 5)],
)
def test_int_strips_identifier_wrappers(text, expected):
    assert to_int(String(text), "p", FMT) == expected


def test_strip_wrapper_leaves_other_text():
    assert strip_wrapper("42") == "42"
    assert strip_wrapper("foo(42)") == "foo(42)"


def test_int_rejects_fraction_and_unknown_wrapper():
    with pytest.raises(TypeMismatch):
        to_int(Number(1.5), "p", FMT)
    with pytest.raises(TypeMismatch):
        to_int(String("foo(42)"), "p", FMT)


# ---------------------------------------------------------------------------
# Booleans, strings, tables, times
# ---------------------------------------------------------------------------


def test_bool_native_and_bare_words():
    assert to_bool(Boolean(True), "p") is True
    assert to_bool(String("false"), "p") is False
    assert to_bool(String("True"), "p") is True


def test_bool_rejects_numbers():
    with pytest.raises(TypeMismatch):
        to_bool(Number(1), "p")


def test_str_strips_surrounding_quotes():
    assert to_str(String('"Bob"'), "p") == "Bob"
    assert to_str(String("Bob"), "p") == "Bob"
    assert to_str(String('say "hi"'), "p") == 'say "hi"'


def test_str_rejects_numbers():
    with pytest.raises(TypeMismatch):
        to_str(Number(1), "p")


def test_table_and_time():
    table = Table()
    assert to_table(table, "p") is table
    with pytest.raises(TypeMismatch):
        to_table(String("x"), "p")
    assert to_time(Number(12.5), "p", FMT) == 12.5
    with pytest.raises(TypeMismatch):
        to_time(Table(), "p", FMT)


def test_default_options():
    options = DecoderOptions()
    assert options.verbose is False
    assert options.number_format.decimal_separator == "."


# ---------------------------------------------------------------------------
# Shape validators
# ---------------------------------------------------------------------------


def test_expect_keys_accepts_exact_shape():
    expect_keys(from_python({"x": 1, "y": 2, "z": 3}), ("x", "y", "z"), "p", ordered_first=True)


def test_expect_keys_rejects_wrong_count():
    with pytest.raises(UnexpectedShape) as info:
        expect_keys(from_python({"x": 1, "y": 2}), ("x", "y", "z"), "pos")
    assert info.value.expected_keys == ("x", "y", "z")
    assert info.value.actual_keys == ("x", "y")
    assert "pos" in str(info.value)


def test_expect_keys_checks_first_key_when_ordered():
    table = from_python({"y": 2, "x": 1, "z": 3})
    expect_keys(table, ("x", "y", "z"), "p")
    with pytest.raises(UnexpectedShape):
        expect_keys(table, ("x", "y", "z"), "p", ordered_first=True)


def test_expect_single_key():
    expect_single_key(from_python({"events": []}), "events", "p")
    with pytest.raises(UnexpectedShape):
        expect_single_key(from_python({"events": [], "extra": 1}), "events", "p")


def test_expect_fields_unknown_and_missing():
    with pytest.raises(UnhandledField) as info:
        expect_fields(from_python({"scale": 1, "speed": 2}), ("scale", "duration"), "ev")
    assert info.value.field == "speed"
    assert info.value.path == "ev.speed"

    with pytest.raises(UnexpectedShape) as info:
        expect_fields(from_python({"scale": 1}), ("scale", "duration"), "ev")
    assert "duration" in str(info.value)
