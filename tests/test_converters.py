"""Unit tests for primitive string conversions."""
import math
from typing import List

import numpy as np
import pytest

from envirotron.converters import (
    builtin_converter,
    custom_converter,
    kind_name,
    parse_bool,
    parse_float,
    parse_integer,
    parse_string,
)
from envirotron.core.exceptions import UnsupportedFieldError


@pytest.mark.parametrize("raw", ["y", "Y", "yes", "YeS", "true", "TRUE", "1"])
def test_parse_bool_true(raw):
    assert parse_bool(raw) is True


@pytest.mark.parametrize("raw", ["n", "N", "no", "nO", "false", "False", "0"])
def test_parse_bool_false(raw):
    assert parse_bool(raw) is False


@pytest.mark.parametrize("raw", ["", "on", "off", "t", "2", " yes", "yes "])
def test_parse_bool_rejects(raw):
    with pytest.raises(ValueError):
        parse_bool(raw)


@pytest.mark.parametrize("kind,raw", [
    (np.int8, "127"), (np.int8, "-128"),
    (np.int16, "32767"), (np.int16, "-32768"),
    (np.int32, "2147483647"), (np.int32, "-2147483648"),
    (np.int64, "9223372036854775807"), (np.int64, "-9223372036854775808"),
    (np.uint8, "255"), (np.uint16, "65535"),
    (np.uint32, "4294967295"), (np.uint64, "18446744073709551615"),
])
def test_parse_integer_limits(kind, raw):
    value = parse_integer(raw, kind)

    assert type(value) is kind
    assert int(value) == int(raw)


def test_parse_integer_plain_int_is_unbounded():
    assert parse_integer("123456789012345678901234567890") == 123456789012345678901234567890
    assert parse_integer("+7") == 7
    assert parse_integer("-0") == 0


@pytest.mark.parametrize("kind,raw", [
    (np.int8, "128"), (np.int8, "-129"),
    (np.uint8, "256"), (np.uint8, "-0"), (np.uint8, "+1"),
    (np.uint64, "18446744073709551616"),
    (int, "0x10"), (int, "1e3"), (int, "1_000"), (int, "\t1"), (int, "٣"),
])
def test_parse_integer_rejects(kind, raw):
    with pytest.raises(ValueError):
        parse_integer(raw, kind)


def test_parse_float_precision():
    assert parse_float("123456789.123456789123456789") == 123456789.123456789123456789
    assert parse_float("1.2345", np.float32) == np.float32(1.2345)
    assert type(parse_float("1.5", np.float64)) is np.float64


def test_parse_float_longdouble_keeps_extended_precision():
    value = parse_float("0.1000000000000000000001", np.longdouble)

    assert type(value) is np.longdouble
    assert value == np.longdouble("0.1000000000000000000001")


def test_parse_float_longdouble_beyond_double_range():
    if np.finfo(np.longdouble).max <= np.finfo(np.float64).max:
        pytest.skip("long double is double precision on this platform")

    assert np.isfinite(parse_float("1e400", np.longdouble))


def test_parse_float_float32_limit():
    assert parse_float("3.4028235e38", np.float32) == np.finfo(np.float32).max


@pytest.mark.parametrize("raw", ["inf", "-inf", "+Infinity", "nan", "NaN"])
def test_parse_float_non_finite_literals(raw):
    assert not math.isfinite(parse_float(raw, np.float32))


@pytest.mark.parametrize("kind,raw", [
    (np.float32, "1e39"), (float, "1e400"), (np.float16, "70000"),
    (float, "abc"), (float, "1_0.5"), (float, " 1.5"), (float, ""),
])
def test_parse_float_rejects(kind, raw):
    with pytest.raises(ValueError):
        parse_float(raw, kind)


def test_parse_string_is_identity():
    raw = "  spaced value  "
    assert parse_string(raw) is raw


class TestConverterLookup:
    """Tests for builtin_converter and custom_converter."""

    def test_bool_before_int(self):
        assert builtin_converter(bool)("yes") is True

    def test_numpy_bool(self):
        value = builtin_converter(np.bool_)("no")

        assert type(value) is np.bool_
        assert not value

    @pytest.mark.parametrize("kind", [int, float, str, np.int8, np.uint64, np.intp, np.uintp, np.float32])
    def test_supported_kinds(self, kind):
        assert builtin_converter(kind) is not None

    @pytest.mark.parametrize("kind", [list, dict, bytes, complex, List[str], list[int], "str", None])
    def test_unsupported_kinds(self, kind):
        assert builtin_converter(kind) is None

    def test_custom_converter_found_on_type(self):
        class Celsius(float):
            @classmethod
            def unmarshal_env(cls, raw):
                return cls(float(raw.rstrip("C")))

        hook = custom_converter(Celsius)

        assert hook("21.5C") == 21.5

    def test_instance_method_hook_yields_rejecting_converter(self):
        class Port(int):
            def unmarshal_env(self, raw):
                return Port(raw)

        hook = custom_converter(Port)

        with pytest.raises(UnsupportedFieldError, match="Port.unmarshal_env"):
            hook("8080")

    def test_custom_converter_absent(self):
        assert custom_converter(int) is None
        assert custom_converter(List[int]) is None

    def test_kind_name(self):
        assert kind_name(np.uint8) == "uint8"
        assert kind_name(int) == "int"
        assert "List" in kind_name(List[int])
