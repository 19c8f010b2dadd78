"""Logical paths used to point at nodes in error messages."""

from __future__ import annotations

from scene_script.values import String, Value, key_text


def child(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def index(path: str, key: Value) -> str:
    if isinstance(key, String):
        name = key.value.strip('"')
        return f'{path}["{name}"]'
    return f"{path}[{key_text(key)}]"
