"""Dynamic value tree produced by evaluating a scene script.

The decoder is written entirely against these types, never against the
evaluator's own node classes.  Tables keep their entries in source order
because several shape checks look at the first key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple, Union


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Number:
    value: Union[int, float]


@dataclass(frozen=True)
class Boolean:
    value: bool


@dataclass(frozen=True)
class Nil:
    pass


NIL = Nil()


@dataclass(frozen=True)
class Table:
    """Ordered key/value entries.  Keys may be any non-nil value."""

    entries: Tuple[Tuple["Value", "Value"], ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Tuple["Value", "Value"]]:
        return iter(self.entries)

    def keys(self) -> list["Value"]:
        return [key for key, _ in self.entries]

    def first_key(self) -> "Value":
        if not self.entries:
            return NIL
        return self.entries[0][0]

    def get(self, key: Union["Value", str, int, float]) -> "Value":
        """Return the value stored under *key*, or ``NIL`` when absent.

        The last matching entry wins, mirroring table assignment semantics
        for duplicated keys in a constructor.
        """
        wanted = _as_key(key)
        found: Value = NIL
        for k, v in self.entries:
            if _keys_equal(k, wanted):
                found = v
        return found

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (String, Number, Boolean, Table, str, int, float)):
            return False
        return not isinstance(self.get(key), Nil)


Value = Union[String, Number, Boolean, Nil, Table]


def _as_key(key: Union[Value, str, int, float]) -> Value:
    if isinstance(key, bool):
        return Boolean(key)
    if isinstance(key, str):
        return String(key)
    if isinstance(key, (int, float)):
        return Number(key)
    return key


def _keys_equal(a: Value, b: Value) -> bool:
    # Lua compares numbers by value (1 == 1.0) and tables by identity.
    if isinstance(a, Number) and isinstance(b, Number):
        return a.value == b.value
    if isinstance(a, Table) or isinstance(b, Table):
        return a is b
    return a == b


def kind_name(value: object) -> str:
    """Lua-style kind name used in diagnostics."""
    if isinstance(value, String):
        return "string"
    if isinstance(value, Boolean):
        return "boolean"
    if isinstance(value, Number):
        return "number"
    if isinstance(value, Table):
        return "table"
    if isinstance(value, Nil) or value is None:
        return "nil"
    return type(value).__name__


def key_text(key: Value) -> str:
    """Render a table key the way it is shown in diagnostics."""
    if isinstance(key, String):
        return key.value
    if isinstance(key, Number):
        return format_number(key.value)
    if isinstance(key, Boolean):
        return "true" if key.value else "false"
    if isinstance(key, Table):
        return f"<table: {len(key)} entries>"
    return "nil"


def format_number(number: Union[int, float]) -> str:
    if isinstance(number, float) and number.is_integer():
        return repr(number)
    return str(number)


def from_python(obj: object) -> Value:
    """Build a value tree from plain Python data.

    ``dict`` becomes a table in insertion order, ``list``/``tuple`` a table
    keyed from 1, ``None`` becomes nil.
    """
    if obj is None:
        return NIL
    if isinstance(obj, (String, Number, Boolean, Nil, Table)):
        return obj
    if isinstance(obj, bool):
        return Boolean(obj)
    if isinstance(obj, (int, float)):
        return Number(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, dict):
        return Table(tuple((from_python(k), from_python(v)) for k, v in obj.items()))
    if isinstance(obj, (list, tuple)):
        return Table(
            tuple((Number(i), from_python(v)) for i, v in enumerate(obj, start=1))
        )
    raise TypeError(f"Cannot convert {type(obj).__name__} to a script value")
