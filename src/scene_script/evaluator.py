"""Evaluate scene script text into a dynamic value tree.

A scene script is a single Lua expression, usually one big table
constructor.  The text is parsed with ``luaparser`` and the resulting AST is
folded into ``scene_script.values`` types, keeping table entries in source
order.  Only the constant subset scripts use is supported: table
constructors, literals, unary minus and a handful of helper calls.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from luaparser import ast as lua_ast
from luaparser import astnodes

from scene_script.errors import EvaluationFailure
from scene_script.values import NIL, Boolean, Nil, Number, String, Table, Value


def _identity(args: List[Value]) -> Value:
    if len(args) != 1:
        raise EvaluationFailure(f"Identifier wrapper takes 1 argument, got {len(args)}")
    return args[0]


def _add_file_data(args: List[Value]) -> Value:
    if len(args) != 2:
        raise EvaluationFailure(
            f"SceneTimelineAddFileData takes 2 arguments, got {len(args)}"
        )
    return args[1]


# Functions a script may call.  The identifier wrappers only document which
# numeric id space an integer belongs to.
BUILTINS: Dict[str, Callable[[List[Value]], Value]] = {
    "wid": _identity,
    "cdiid": _identity,
    "fid": _identity,
    "cid": _identity,
    "gdi": _identity,
    "iid": _identity,
    "SceneTimelineAddFileData": _add_file_data,
}


def evaluate(source: str) -> Optional[Value]:
    """Evaluate *source* and return its value, or None for a void script.

    Raises:
        EvaluationFailure: the text does not parse, or uses an expression
        outside the supported constant subset.
    """
    try:
        chunk = lua_ast.parse("return " + source)
    # luaparser raises several unrelated exception types on malformed input
    except Exception as exc:
        raise EvaluationFailure(f"Cannot parse scene script: {exc}") from exc

    statements = [
        node for node in chunk.body.body if not isinstance(node, astnodes.Comment)
    ]
    if len(statements) != 1 or not isinstance(statements[0], astnodes.Return):
        raise EvaluationFailure("Scene script must be a single expression")

    values = statements[0].values
    if values is None:
        values = []
    elif not isinstance(values, list):
        values = [values]
    if not values:
        return None
    return _eval(values[0])


def _eval(node: astnodes.Node) -> Value:
    if isinstance(node, astnodes.Table):
        return _eval_table(node)
    if isinstance(node, astnodes.Number):
        return Number(node.n)
    if isinstance(node, astnodes.String):
        return String(_string_text(node))
    if isinstance(node, astnodes.TrueExpr):
        return Boolean(True)
    if isinstance(node, astnodes.FalseExpr):
        return Boolean(False)
    if isinstance(node, astnodes.Nil):
        return NIL
    if isinstance(node, astnodes.UMinusOp):
        operand = _eval(node.operand)
        if not isinstance(operand, Number):
            raise EvaluationFailure("Unary minus applied to a non-number")
        return Number(-operand.value)
    if isinstance(node, astnodes.Call):
        return _eval_call(node)
    raise EvaluationFailure(f"Unsupported expression: {type(node).__name__}")


def _eval_call(node: astnodes.Call) -> Value:
    if not isinstance(node.func, astnodes.Name):
        raise EvaluationFailure("Only calls to named helper functions are supported")
    builtin = BUILTINS.get(node.func.id)
    if builtin is None:
        raise EvaluationFailure(f"Call to unknown function {node.func.id!r}")
    return builtin([_eval(arg) for arg in node.args])


def _slot(key: Value) -> object:
    # Tables are keyed by identity; Number(1) and Number(1.0) hash alike.
    return id(key) if isinstance(key, Table) else key


def _eval_table(node: astnodes.Table) -> Table:
    """Build a table; a repeated key keeps its first position and last value."""
    entries: List[Optional[Tuple[Value, Value]]] = []
    slots: Dict[object, int] = {}
    position = 1
    for item in node.fields:
        if isinstance(item, astnodes.Comment):
            continue
        key_node = getattr(item, "key", None)
        if key_node is None:
            key: Value = Number(position)
            position += 1
        elif isinstance(key_node, astnodes.Name) and not getattr(
            item, "between_brackets", False
        ):
            key = String(key_node.id)
        else:
            key = _eval(key_node)
        if isinstance(key, Nil):
            raise EvaluationFailure("Table index is nil")
        value = _eval(item.value)
        slot = slots.get(_slot(key))
        # Assigning nil removes the entry, as in Lua.
        if isinstance(value, Nil):
            if slot is not None:
                entries[slot] = None
                del slots[_slot(key)]
            continue
        if slot is None:
            slots[_slot(key)] = len(entries)
            entries.append((key, value))
        else:
            entries[slot] = (entries[slot][0], value)
    return Table(tuple(entry for entry in entries if entry is not None))


def _string_text(node: astnodes.String) -> str:
    text = node.s
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    return text
