"""Timeline assembler: value tree -> ``Timeline``.

Expected tree::

    { actors = { ["Bob"] = { properties = { Scale = { events = {...} } } } } }
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from scene_script.coerce import to_str, to_table
from scene_script.config import DEFAULT_OPTIONS, DecoderOptions
from scene_script.dispatch import dispatch
from scene_script.errors import EvaluationFailure, SceneScriptError, UnhandledProperty
from scene_script.evaluator import evaluate
from scene_script.model import Actor, Property, PropertyKind, PropertySet, Timeline
from scene_script.paths import child, index
from scene_script.shapes import expect_single_key
from scene_script.values import Nil, String, Table, Value, key_text

log = logging.getLogger(__name__)

ROOT_KEYS = ("actors",)


def decode(root: Optional[Value], options: DecoderOptions = DEFAULT_OPTIONS) -> Timeline:
    """Decode an evaluated scene script.

    A void result (documentation-only script) decodes to an empty timeline.
    Any other malformed input raises a ``DecodeError`` subclass.
    """
    if root is None or isinstance(root, Nil):
        return Timeline.empty()

    table = to_table(root, "<root>")
    # Every root key is checked before any actor is decoded.
    for key, _ in table:
        if not (isinstance(key, String) and key.value in ROOT_KEYS):
            raise UnhandledProperty(key_text(key), path=key_text(key))

    actors: Dict[str, Actor] = {}
    for _, value in table:
        actors.update(decode_actors(to_table(value, "actors"), "actors", options))
    return Timeline(actors)


def decode_actors(table: Table, path: str, options: DecoderOptions) -> Dict[str, Actor]:
    actors: Dict[str, Actor] = {}
    for key, value in table:
        actor_path = index(path, key)
        name = to_str(key, actor_path)
        actors[name] = decode_actor(to_table(value, actor_path), actor_path, options)
        log.debug("Decoded actor %s", actor_path)
    return actors


def decode_actor(table: Table, path: str, options: DecoderOptions) -> Actor:
    expect_single_key(table, "properties", path)
    properties_path = child(path, "properties")
    properties = to_table(table.get("properties"), properties_path)

    decoded: Dict[PropertyKind, Property] = {}
    for key, value in properties:
        name = to_str(key, properties_path)
        property_path = child(properties_path, name)
        result = dispatch(name, to_table(value, property_path), property_path, options)
        if result is not None:
            kind, prop = result
            decoded[kind] = prop
    return Actor(PropertySet.from_kinds(decoded))


def load_timeline(source: str, options: DecoderOptions = DEFAULT_OPTIONS) -> Timeline:
    """Evaluate and decode script text.

    A script the evaluator cannot read yields an empty timeline and a logged
    warning so one bad file does not stop a batch load.  Decode errors in a
    readable script still propagate.
    """
    try:
        root = evaluate(source)
    except EvaluationFailure as exc:
        log.warning("Scene script could not be evaluated: %s", exc)
        return Timeline.empty()
    return decode(root, options)


def load_timeline_file(
    path: Union[str, Path], options: DecoderOptions = DEFAULT_OPTIONS
) -> Timeline:
    try:
        source = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SceneScriptError(f"Cannot read scene script: {exc}") from exc
    return load_timeline(source, options)
