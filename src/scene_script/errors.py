"""Exceptions raised while evaluating and decoding scene scripts."""

from __future__ import annotations

from typing import Optional, Sequence

from scene_script.values import Value, key_text, kind_name


class SceneScriptError(Exception):
    """Base error for everything this package raises."""


class EvaluationFailure(SceneScriptError):
    """Raised when script text cannot be turned into a value tree."""


class DecodeError(SceneScriptError):
    """A value tree did not match the timeline schema.

    Every decode error names the logical path of the offending node, e.g.
    ``actors["Bob"].properties.Scale.events[0.0].scale``.
    """

    def __init__(self, message: str, *, path: str, value: Optional[Value] = None):
        self.path = path
        self.value = value
        detail = f"{message} at {path}" if path else message
        if value is not None:
            detail += f" (got {_describe(value)})"
        super().__init__(detail)


class TypeMismatch(DecodeError):
    """A value's kind did not match the required primitive."""

    def __init__(self, expected: str, value: Value, *, path: str):
        self.expected = expected
        self.actual = kind_name(value)
        super().__init__(
            f"Expected {expected}, found {self.actual}", path=path, value=value
        )


class UnexpectedShape(DecodeError):
    """A table's key set or key order did not match the required shape."""

    def __init__(
        self,
        expected_keys: Sequence[str],
        actual_keys: Sequence[str],
        *,
        path: str,
        detail: str = "",
    ):
        self.expected_keys = tuple(expected_keys)
        self.actual_keys = tuple(actual_keys)
        message = (
            f"Unexpected table shape: expected keys {list(self.expected_keys)}, "
            f"got {list(self.actual_keys)}"
        )
        if detail:
            message += f" ({detail})"
        super().__init__(message, path=path)


class UnhandledField(DecodeError):
    """A known container held a field name this decoder does not support."""

    def __init__(self, field: str, *, path: str, value: Optional[Value] = None):
        self.field = field
        super().__init__(f"Unhandled field {field!r}", path=path, value=value)


class UnhandledProperty(DecodeError):
    """An unknown property kind or root key."""

    def __init__(self, name: str, *, path: str):
        self.name = name
        super().__init__(f"Unhandled property {name!r}", path=path)


def _describe(value: Value) -> str:
    kind = kind_name(value)
    if kind == "nil":
        return kind
    if kind == "table":
        return key_text(value)
    return f"{kind} {key_text(value)!r}"
