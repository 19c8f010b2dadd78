"""Timeline -> plain JSON-ready data, checked against the Timeline contract."""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any, Dict

import jsonschema

from scene_script.errors import SceneScriptError
from scene_script.model import (
    CreatureID,
    FileDataID,
    GameObjectDisplayInfoID,
    ItemID,
    MoveSplineProperty,
    Property,
    Timeline,
)

_SCHEMAS_DIR = Path(__file__).resolve().parent / "schemas"
_TIMELINE_SCHEMA_PATH = _SCHEMAS_DIR / "Timeline.v1.json"

SCHEMA_ID = "Timeline"
SCHEMA_VERSION = "1.0"

_IDENTIFIER_TYPES = (CreatureID, FileDataID, GameObjectDisplayInfoID, ItemID)


class ExportError(SceneScriptError):
    """Raised when exported timeline data violates the Timeline contract."""


def timeline_to_dict(timeline: Timeline) -> Dict[str, Any]:
    """Convert *timeline* to plain data keyed by script field names.

    Time keys become strings (``repr`` of the float) because JSON object keys
    must be strings.
    """
    actors = {}
    for name in sorted(timeline.actors):
        properties = timeline.actors[name].properties
        actors[name] = {
            "properties": {
                kind.value: property_to_dict(prop) for kind, prop in properties.present()
            }
        }
    return {
        "schema_id": SCHEMA_ID,
        "schema_version": SCHEMA_VERSION,
        "actors": actors,
    }


def property_to_dict(prop: Property) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "events": {repr(time): _plain(prop.events[time]) for time in prop.times()}
    }
    if isinstance(prop, MoveSplineProperty):
        data["flags"] = {
            f.metadata["script"]: getattr(prop, f.name)
            for f in dataclasses.fields(prop)
            if "script" in f.metadata
        }
    return data


def _plain(obj: Any) -> Any:
    if isinstance(obj, _IDENTIFIER_TYPES):
        return obj.id
    if dataclasses.is_dataclass(obj):
        out = {}
        for f in dataclasses.fields(obj):
            value = getattr(obj, f.name)
            # Appearance events leave unset fields as None
            if value is None:
                continue
            out[f.metadata.get("script", f.name)] = _plain(value)
        return out
    return obj


def validate_timeline_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate exported timeline data against Timeline.v1.json.

    Returns *data* unchanged on success.
    Raises ExportError on any violation.
    """
    schema = json.loads(_TIMELINE_SCHEMA_PATH.read_text(encoding="utf-8"))
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise ExportError(
            f"Timeline violates contract schema at {location}: {exc.message}"
        ) from exc
    return data
