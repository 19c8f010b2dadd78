"""Shape validators run before every fixed-shape destructuring step."""

from __future__ import annotations

from typing import Iterable, Sequence

from scene_script.errors import UnexpectedShape, UnhandledField
from scene_script.paths import child
from scene_script.values import String, Table, key_text


def key_names(table: Table) -> list[str]:
    return [key_text(key) for key in table.keys()]


def expect_keys(
    table: Table,
    expected: Sequence[str],
    path: str,
    *,
    ordered_first: bool = False,
) -> None:
    """Require *table* to hold exactly the string keys in *expected*.

    With ``ordered_first`` the first key must also be ``expected[0]``.
    """
    actual = key_names(table)
    keys = table.keys()
    if len(keys) != len(expected) or any(not isinstance(k, String) for k in keys):
        raise UnexpectedShape(expected, actual, path=path)
    if set(actual) != set(expected):
        raise UnexpectedShape(expected, actual, path=path)
    if ordered_first and actual[0] != expected[0]:
        raise UnexpectedShape(
            expected, actual, path=path, detail=f"first key must be {expected[0]!r}"
        )


def expect_single_key(table: Table, key: str, path: str) -> None:
    expect_keys(table, (key,), path)


def expect_fields(table: Table, allowed: Iterable[str], path: str) -> None:
    """Require every field of *allowed* and nothing else.

    Unknown names raise ``UnhandledField``; missing names ``UnexpectedShape``.
    """
    allowed = tuple(allowed)
    for key, value in table:
        if not isinstance(key, String) or key.value not in allowed:
            name = key_text(key)
            raise UnhandledField(name, path=child(path, name), value=value)
    present = set(key_names(table))
    missing = [name for name in allowed if name not in present]
    if missing:
        raise UnexpectedShape(
            allowed,
            key_names(table),
            path=path,
            detail="missing " + ", ".join(missing),
        )
