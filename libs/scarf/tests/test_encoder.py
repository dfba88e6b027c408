"""Tests for the analytics property encoder."""

import array
import json
import sys
from collections import OrderedDict
from decimal import Decimal
from enum import IntEnum

import pytest

from scarf.analytics.encoder import display_text, encode_properties, quote, to_json

int_digit_limit = pytest.mark.skipif(
    not 0 < getattr(sys, "get_int_max_str_digits", lambda: 0)() <= 5000,
    reason="interpreter has no int to str digit limit",
)


class TestEncodeProperties:
    """Tests for the top-level wire encoding."""

    def test_empty_mapping(self):
        """Test that an empty mapping encodes to an empty object."""
        assert encode_properties({}) == "{}"
        assert encode_properties(None) == "{}"

    def test_simple_mapping(self):
        """Test that string values are kept in insertion order."""
        props = {"event": "download", "version": "1.0.0"}
        assert encode_properties(props) == '{"event":"download","version":"1.0.0"}'

    def test_values_sent_as_strings(self):
        """Test that non-string values are sent as their display text."""
        props = {"a": 1, "b": True, "c": 12.5}
        assert encode_properties(props) == '{"a":"1","b":"true","c":"12.5"}'

    def test_none_stays_null(self):
        """Test that None is sent as JSON null rather than a string."""
        assert encode_properties({"a": None, "b": False}) == '{"a":null,"b":"false"}'

    def test_string_escaping(self):
        """Test that quotes, backslashes and newlines are escaped."""
        assert encode_properties({"s": 'a"b\\c\n'}) == '{"s":"a\\"b\\\\c\\n"}'

    def test_key_order_follows_mapping(self):
        """Test that output order is the mapping's iteration order."""
        props = OrderedDict([("z", "1"), ("a", "2"), ("m", "3")])
        assert list(json.loads(encode_properties(props))) == ["z", "a", "m"]

    def test_nested_values_sent_as_json_text(self):
        """Test that containers are sent as strings holding their JSON form."""
        props = {"m": {"a": 1}, "l": [1, "x"]}
        assert encode_properties(props) == '{"m":"{\\"a\\":1}","l":"[1,\\"x\\"]"}'

    def test_non_finite_floats(self):
        """Test that non-finite floats are sent as text."""
        props = {"n": float("nan"), "p": float("inf"), "m": float("-inf")}
        assert encode_properties(props) == '{"n":"NaN","p":"Infinity","m":"-Infinity"}'

    def test_other_objects_use_str(self):
        """Test that unknown objects fall back to str()."""

        class Thing:
            def __str__(self):
                return "thing"

        assert encode_properties({"t": Thing()}) == '{"t":"thing"}'

    def test_output_is_valid_json(self):
        """Test that the encoded body parses back to the display text."""
        props = {"event": "run", "count": 2, "ok": True, "none": None}
        assert json.loads(encode_properties(props)) == {
            "event": "run",
            "count": "2",
            "ok": "true",
            "none": None,
        }

    def test_repeated_calls_identical(self):
        """Test that encoding the same mapping twice gives the same bytes."""
        props = {"b": 2, "a": {"y": [1, 2], "x": None}, "c": "é"}
        assert encode_properties(props) == encode_properties(props)

    def test_input_not_mutated(self):
        """Test that the caller's mapping is left untouched."""
        props = {"a": [1, 2], "b": {"c": 1}}
        encode_properties(props)
        assert props == {"a": [1, 2], "b": {"c": 1}}


class TestToJson:
    """Tests for the general recursive encoder."""

    def test_primitives(self):
        """Test that primitives keep their native JSON types."""
        assert to_json(None) == "null"
        assert to_json(True) == "true"
        assert to_json(False) == "false"
        assert to_json(42) == "42"
        assert to_json(12.5) == "12.5"
        assert to_json(Decimal("1.10")) == "1.10"
        assert to_json("hi") == '"hi"'

    def test_non_finite_numbers_become_null(self):
        """Test that NaN and infinities encode as null."""
        assert to_json(float("nan")) == "null"
        assert to_json(float("inf")) == "null"
        assert to_json(float("-inf")) == "null"
        assert to_json(Decimal("NaN")) == "null"

    def test_nested_structures(self):
        """Test that nested mappings and lists keep their structure."""
        value = {"a": [1, True, None], "b": {"c": 1.5}}
        assert to_json(value) == '{"a":[1,true,null],"b":{"c":1.5}}'

    def test_non_string_keys_dropped(self):
        """Test that nested keys that are not strings are skipped."""
        assert to_json({1: "x", "k": "v", None: 2}) == '{"k":"v"}'

    def test_array_like_values(self):
        """Test that tuples, bytes and arrays encode as JSON arrays."""
        assert to_json((1, 2)) == "[1,2]"
        assert to_json(b"ab") == "[97,98]"
        assert to_json(bytearray(b"\x00")) == "[0]"
        assert to_json(memoryview(b"\x01\x02")) == "[1,2]"
        assert to_json(array.array("d", [1.0, 2.5])) == "[1.0,2.5]"

    def test_empty_containers(self):
        """Test that empty containers encode as {} and []."""
        assert to_json({}) == "{}"
        assert to_json([]) == "[]"

    def test_fallback_to_str(self):
        """Test that other objects are quoted via str()."""
        assert to_json({3}) == '"{3}"'


class TestQuote:
    """Tests for string escaping."""

    def test_named_escapes(self):
        """Test the two-character escape sequences."""
        assert quote('\\"\b\f\n\r\t') == '"\\\\\\"\\b\\f\\n\\r\\t"'

    def test_control_characters(self):
        """Test that other control characters use lowercase \\u00xx escapes."""
        assert quote("\x00\x1f\x1b") == '"\\u0000\\u001f\\u001b"'

    def test_non_ascii_passes_through(self):
        """Test that non-ASCII text is not escaped."""
        assert quote("héllo ☃ \x7f") == '"héllo ☃ \x7f"'

    def test_parses_back(self):
        """Test that quoted text round-trips through the json module."""
        text = 'tab\there "quoted" \\ \x01 end'
        assert json.loads(quote(text)) == text


def test_display_text():
    """Test display text of top-level values."""
    assert display_text(True) == "true"
    assert display_text(7) == "7"
    assert display_text(1.0) == "1.0"
    assert display_text("x") == "x"
    assert display_text({"a": None}) == '{"a":null}'


class Level(IntEnum):
    LOW = 1
    HIGH = 2


class TestNumberEdgeCases:
    """Tests for numbers without a plain decimal text form."""

    @int_digit_limit
    def test_oversized_int_nested(self):
        """Test that ints beyond the str conversion limit encode as null."""
        assert to_json(10**5000) == "null"
        assert encode_properties({"m": {"n": 10**5000}}) == '{"m":"{\\"n\\":null}"}'

    @int_digit_limit
    def test_oversized_int_top_level(self):
        """Test that an oversized top-level int is sent as null."""
        assert encode_properties({"n": 10**5000, "a": 1}) == '{"n":null,"a":"1"}'

    def test_int_enum_stays_numeric(self):
        """Test that IntEnum members encode as their integer value."""
        assert to_json(Level.HIGH) == "2"
        assert to_json({"level": Level.LOW}) == '{"level":1}'
        assert encode_properties({"level": Level.HIGH}) == '{"level":"2"}'
