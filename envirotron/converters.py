"""String to value conversion for primitive field kinds.

Every converter takes the raw environment string and either returns a value
of the requested kind or raises ``ValueError`` with a short reason. The
overrider turns those into :class:`ConversionError` with the field context
attached.
"""
from __future__ import annotations

import inspect
import re
import typing
from typing import Any, Callable, Optional

import numpy as np

from envirotron.core.exceptions import UnsupportedFieldError

TRUE_VALUES = frozenset({"y", "yes", "true", "1"})
FALSE_VALUES = frozenset({"n", "no", "false", "0"})

_SIGNED_PATTERN = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_PATTERN = re.compile(r"[0-9]+")
_NON_FINITE_LITERALS = frozenset({"inf", "infinity", "nan"})

Converter = Callable[[str], Any]


def parse_bool(raw: str) -> bool:
    """Parse a boolean from the fixed y/yes/true/1 and n/no/false/0 vocabulary."""
    lowered = raw.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError("not a recognized boolean")


def parse_integer(raw: str, kind: type = int) -> Any:
    """Parse a base-10 integer that must fit the width of ``kind``.

    Plain ``int`` has no width limit. numpy integer kinds are bounded by
    ``numpy.iinfo`` and unsigned kinds reject any sign.
    """
    unsigned = kind is not int and issubclass(kind, np.unsignedinteger)
    pattern = _UNSIGNED_PATTERN if unsigned else _SIGNED_PATTERN
    if not pattern.fullmatch(raw):
        expected = "unsigned" if unsigned else "signed"
        raise ValueError(f"not a base-10 {expected} integer")

    value = int(raw, 10)
    if kind is int:
        return value

    info = np.iinfo(kind)
    if value < info.min or value > info.max:
        raise ValueError(f"out of range [{info.min}, {info.max}]")
    return kind(value)


def parse_float(raw: str, kind: type = float) -> Any:
    """Parse a base-10 floating point literal at the precision of ``kind``."""
    if "_" in raw or raw != raw.strip():
        raise ValueError("not a floating point literal")
    try:
        value = float(raw)
    except ValueError:
        raise ValueError("not a floating point literal") from None

    if kind is float:
        converted = value
    elif np.finfo(kind).precision > np.finfo(np.float64).precision:
        # Wider than double: let numpy parse the text itself
        converted = kind(raw)
    else:
        with np.errstate(over="ignore"):
            converted = kind(value)

    literal = raw.lstrip("+-").lower()
    if not np.isfinite(converted) and literal not in _NON_FINITE_LITERALS:
        raise ValueError(f"overflows {kind.__name__}")
    return converted


def parse_string(raw: str) -> str:
    return raw


def _bool_converter(kind: type) -> Converter:
    if kind is bool:
        return parse_bool
    return lambda raw: kind(parse_bool(raw))


def builtin_converter(kind: Any) -> Optional[Converter]:
    """Return the built-in converter for a declared field kind, if any.

    Checked in order: boolean, integer, floating point, string. ``bool`` is
    tested before ``int`` since it is an ``int`` subclass.
    """
    if not isinstance(kind, type) or typing.get_origin(kind) is not None:
        return None
    if kind is bool or kind is np.bool_:
        return _bool_converter(kind)
    if kind is int or issubclass(kind, np.integer):
        return lambda raw: parse_integer(raw, kind)
    if kind is float or issubclass(kind, np.floating):
        return lambda raw: parse_float(raw, kind)
    if kind is str:
        return parse_string
    return None


def custom_converter(kind: Any) -> Optional[Converter]:
    """Return the type's own ``unmarshal_env`` hook, if it defines one.

    The hook must be a classmethod or staticmethod taking the raw string and
    returning the new field value. A plain instance method has no instance to
    run on; the returned converter raises UnsupportedFieldError when used.
    """
    if not isinstance(kind, type):
        return None
    try:
        declared = inspect.getattr_static(kind, "unmarshal_env")
    except AttributeError:
        return None
    if inspect.isfunction(declared):
        def reject(raw: str) -> Any:
            raise UnsupportedFieldError(
                f"{kind.__qualname__}.unmarshal_env must be a classmethod or staticmethod")
        return reject
    hook = getattr(kind, "unmarshal_env")
    return hook if callable(hook) else None


def kind_name(kind: Any) -> str:
    return getattr(kind, "__name__", None) or str(kind)


__all__ = [
    "TRUE_VALUES",
    "FALSE_VALUES",
    "parse_bool",
    "parse_integer",
    "parse_float",
    "parse_string",
    "builtin_converter",
    "custom_converter",
    "kind_name",
]
