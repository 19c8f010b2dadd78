"""Property dispatcher: property name -> event decoder.

Unknown property kinds are the one unknown the decoder tolerates; newer
scripts add kinds before this package learns them.  In verbose mode their
events are dumped to the log to help add support later.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Mapping, Optional, Tuple

from scene_script import events
from scene_script.coerce import to_table
from scene_script.config import DEFAULT_OPTIONS, DecoderOptions
from scene_script.errors import DecodeError, UnhandledProperty
from scene_script.geometry import decode_placement, decode_position
from scene_script.model import Property, PropertyKind, Transform
from scene_script.paths import child, index
from scene_script.shapes import expect_single_key
from scene_script.values import Boolean, Number, String, Table, Value, key_text, kind_name

log = logging.getLogger(__name__)

PropertyDecoder = Callable[[Table, str, DecoderOptions], Property]

PROPERTY_DECODERS: Mapping[PropertyKind, PropertyDecoder] = {
    PropertyKind.APPEARANCE: events.decode_appearance,
    PropertyKind.CUSTOM_SCRIPT: events.decode_custom_script,
    PropertyKind.EQUIP_WEAPON: events.decode_equip_weapon,
    PropertyKind.FADE: events.decode_fade,
    PropertyKind.FADE_REGION: events.decode_fade_region,
    PropertyKind.GROUND_SNAP: events.decode_ground_snap,
    PropertyKind.MOVE_SPLINE: events.decode_move_spline,
    PropertyKind.MUSIC: events.decode_music,
    PropertyKind.SCALE: events.decode_scale,
    PropertyKind.SHEATHE: events.decode_sheathe,
    PropertyKind.TRANSFORM: events.decode_transform_property,
}


def dispatch(
    name: str,
    property_table: Table,
    path: str,
    options: DecoderOptions = DEFAULT_OPTIONS,
) -> Optional[Tuple[PropertyKind, Property]]:
    """Decode one property table, or return None for an unknown kind.

    The ``events`` wrapper is validated for every kind, known or not.
    """
    expect_single_key(property_table, "events", path)
    events_path = child(path, "events")
    events_table = to_table(property_table.get("events"), events_path)

    kind = PropertyKind.lookup(name)
    if kind is None:
        if options.verbose:
            log.info("%s", UnhandledProperty(name, path=path))
            dump_events(events_table, events_path, options)
        return None
    return kind, PROPERTY_DECODERS[kind](events_table, events_path, options)


# ---------------------------------------------------------------------------
# Diagnostic dump
# ---------------------------------------------------------------------------


def dump_events(
    events_table: Table, path: str, options: DecoderOptions = DEFAULT_OPTIONS
) -> List[str]:
    """Untyped walk over an unknown property's events.

    Returns the rendered lines and logs each at DEBUG.  Malformed data is
    rendered inline instead of raised.
    """
    lines: List[str] = []
    for group_key, group in events_table:
        lines.append(f"Event: {key_text(group_key)}")
        if not isinstance(group, Table):
            lines.append(f"  {_render_scalar(group)}")
            continue
        if events.is_record(group, options.number_format):
            lines.extend(_dump_record(group, index(path, group_key), options))
            continue
        for event_key, record in group:
            lines.append(f"  {key_text(event_key)}")
            if not isinstance(record, Table):
                lines.append(f"    {_render_scalar(record)}")
                continue
            lines.extend(_dump_record(record, index(path, event_key), options))
    for line in lines:
        log.debug("%s: %s", path, line)
    return lines


def _dump_record(record: Table, path: str, options: DecoderOptions) -> List[str]:
    lines = []
    for field_key, value in record:
        field_name = key_text(field_key)
        rendered = _render_field(field_name, value, child(path, field_name), options)
        lines.append(f"    {field_name} = {rendered}")
    return lines


def _render_scalar(value: Value) -> str:
    if isinstance(value, String):
        return value.value
    if isinstance(value, (Number, Boolean)):
        return key_text(value)
    return f"<{kind_name(value)}>"


def _render_field(name: str, value: Value, path: str, options: DecoderOptions) -> str:
    if not isinstance(value, Table):
        return _render_scalar(value)
    try:
        if name in ("transform", "position"):
            return _render_transform(decode_placement(value, path, options))
        if name == "offset":
            pos = decode_position(value, path, options)
            return f"{pos.x} {pos.y} {pos.z}"
    except DecodeError as exc:
        return f"<unreadable {name}: {exc}>"
    return f"<table: {len(value)} entries>"


def _render_transform(tf: Transform) -> str:
    pos = tf.position
    return (
        f"XYZ: <{pos.x}, {pos.y}, {pos.z}>, "
        f"yaw: {tf.yaw}, pitch: {tf.pitch}, roll: {tf.roll}"
    )
