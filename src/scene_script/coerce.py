"""Primitive coercers: dynamic value -> required Python primitive.

Every coercer either returns the primitive or raises ``TypeMismatch`` naming
the logical path of the value.
"""

from __future__ import annotations

import re
import struct

from scene_script.config import NumberFormat, NumberFormatError
from scene_script.errors import TypeMismatch
from scene_script.values import Boolean, Number, String, Table, Value

# Marker calls the script format wraps around plain integer identifiers.
WRAPPER_NAMES = ("cid", "fid", "gdi", "iid", "wid", "cdiid")

_WRAPPER_RE = re.compile(r"^\s*(?:%s)\s*\(\s*(.*?)\s*\)\s*$" % "|".join(WRAPPER_NAMES))


def float32(number: float) -> float:
    """Round *number* to single precision, the width of the timeline model."""
    return struct.unpack("<f", struct.pack("<f", number))[0]


def strip_wrapper(text: str) -> str:
    """Remove one identifier wrapper call, e.g. ``"cid(42)"`` -> ``"42"``."""
    match = _WRAPPER_RE.match(text)
    if match is None:
        return text
    return match.group(1)


def to_float(value: Value, path: str, fmt: NumberFormat) -> float:
    if isinstance(value, Number):
        return float32(float(value.value))
    if isinstance(value, String):
        try:
            return float32(fmt.parse_float(value.value))
        except NumberFormatError:
            raise TypeMismatch("number", value, path=path) from None
    raise TypeMismatch("number", value, path=path)


def to_int(value: Value, path: str, fmt: NumberFormat) -> int:
    if isinstance(value, Number):
        number = value.value
        if isinstance(number, float):
            if not number.is_integer():
                raise TypeMismatch("integer", value, path=path)
            return int(number)
        return number
    if isinstance(value, String):
        try:
            return fmt.parse_int(strip_wrapper(value.value))
        except NumberFormatError:
            raise TypeMismatch("integer", value, path=path) from None
    raise TypeMismatch("integer", value, path=path)


def to_bool(value: Value, path: str) -> bool:
    if isinstance(value, Boolean):
        return value.value
    if isinstance(value, String):
        word = value.value.strip().lower()
        if word == "true":
            return True
        if word == "false":
            return False
    raise TypeMismatch("boolean", value, path=path)


def to_str(value: Value, path: str) -> str:
    if isinstance(value, String):
        text = value.value
        if len(text) >= 2 and text[0] == text[-1] == '"':
            return text[1:-1]
        return text
    raise TypeMismatch("string", value, path=path)


def to_time(value: Value, path: str, fmt: NumberFormat) -> float:
    """Coerce an event key to its time in seconds."""
    if not isinstance(value, (Number, String)):
        raise TypeMismatch("time (number)", value, path=path)
    return to_float(value, path, fmt)


def to_table(value: Value, path: str) -> Table:
    if isinstance(value, Table):
        return value
    raise TypeMismatch("table", value, path=path)
