"""Event decoders, one per property kind.

A property's ``events`` table keys its records by time, either directly or
wrapped one level deeper::

    events = { [0.0] = { scale = 1.0, duration = 2.5 }, [1.5] = {...} }
    events = { { [0.0] = { scale = 1.0, duration = 2.5 } }, { [1.5] = {...} } }

An entry whose value holds only field names is a record; any other entry is
a wrapper group.  The decoders accept both forms, mixed freely, and key the
result by time.  A record with a field the decoder does not know is rejected
rather than dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Sequence, Tuple

from scene_script.coerce import to_bool, to_float, to_int, to_str, to_table, to_time
from scene_script.config import DecoderOptions, NumberFormat, NumberFormatError
from scene_script.errors import TypeMismatch, UnhandledField
from scene_script.geometry import decode_placement, decode_transform
from scene_script.model import (
    AppearanceEvent,
    CreatureID,
    CustomScriptEvent,
    EquipWeaponEvent,
    FadeEvent,
    FadeRegionEvent,
    FileDataID,
    GameObjectDisplayInfoID,
    GroundSnapEvent,
    ItemID,
    MoveSplineProperty,
    MusicEvent,
    Property,
    ScaleEvent,
    SheatheEvent,
    Transform,
)
from scene_script.paths import child, index
from scene_script.shapes import expect_fields
from scene_script.values import Number, String, Table, Value, key_text

Coercer = Callable[[Value, str, NumberFormat], Any]
RecordDecoder = Callable[[Table, str, DecoderOptions], Any]


# ---------------------------------------------------------------------------
# Field coercions
# ---------------------------------------------------------------------------


def _float(value: Value, path: str, fmt: NumberFormat) -> float:
    return to_float(value, path, fmt)


def _int(value: Value, path: str, fmt: NumberFormat) -> int:
    return to_int(value, path, fmt)


def _bool(value: Value, path: str, fmt: NumberFormat) -> bool:
    return to_bool(value, path)


def _str(value: Value, path: str, fmt: NumberFormat) -> str:
    return to_str(value, path)


def _identifier(id_type: type) -> Coercer:
    def coerce(value: Value, path: str, fmt: NumberFormat) -> Any:
        return id_type(to_int(value, path, fmt))

    return coerce


@dataclass(frozen=True)
class FieldSpec:
    name: str
    attr: str
    coerce: Coercer


# ---------------------------------------------------------------------------
# Per-kind field tables
# ---------------------------------------------------------------------------

MUSIC_FIELDS = (FieldSpec("soundKitID", "sound_kit_id", _int),)

GROUND_SNAP_FIELDS = (FieldSpec("snap", "snap", _bool),)

CUSTOM_SCRIPT_FIELDS = (FieldSpec("script", "script", _str),)

SCALE_FIELDS = (
    FieldSpec("scale", "scale", _float),
    FieldSpec("duration", "duration", _float),
)

FADE_FIELDS = (
    FieldSpec("alpha", "alpha", _float),
    FieldSpec("time", "time", _float),
)

FADE_REGION_FIELDS = (
    FieldSpec("enabled", "enabled", _bool),
    FieldSpec("radius", "radius", _float),
    FieldSpec("includePlayer", "include_player", _bool),
    FieldSpec("excludePlayers", "exclude_players", _bool),
    FieldSpec("excludeNonPlayers", "exclude_non_players", _bool),
    FieldSpec("includeSounds", "include_sounds", _bool),
    FieldSpec("includeWMOs", "include_wmos", _bool),
)

SHEATHE_FIELDS = (
    FieldSpec("isSheathed", "is_sheathed", _bool),
    FieldSpec("isRanged", "is_ranged", _bool),
    FieldSpec("animated", "animated", _bool),
)

EQUIP_WEAPON_FIELDS = (
    FieldSpec("itemID", "item_id", _int),
    FieldSpec("MainHand", "main_hand", _bool),
    FieldSpec("OffHand", "off_hand", _bool),
    FieldSpec("Ranged", "ranged", _bool),
)

APPEARANCE_FIELDS = (
    FieldSpec("creatureID", "creature_id", _identifier(CreatureID)),
    FieldSpec("creatureDisplaySetIndex", "creature_display_set_index", _int),
    FieldSpec("creatureDisplayInfoID", "creature_display_info_id", _int),
    FieldSpec("fileDataID", "file_data_id", _identifier(FileDataID)),
    FieldSpec(
        "wmoGameObjectDisplayID",
        "wmo_game_object_display_id",
        _identifier(GameObjectDisplayInfoID),
    ),
    FieldSpec("itemID", "item_id", _identifier(ItemID)),
    FieldSpec("isPlayerClone", "is_player_clone", _bool),
    FieldSpec("isPlayerCloneNative", "is_player_clone_native", _bool),
    FieldSpec("playerSummon", "player_summon", _bool),
    FieldSpec("playerGroupIndex", "player_group_index", _int),
    FieldSpec("smoothPhase", "smooth_phase", _bool),
)

MOVE_SPLINE_FLAGS = (
    FieldSpec("overrideSpeed", "override_speed", _float),
    FieldSpec("useModelRunSpeed", "use_model_run_speed", _bool),
    FieldSpec("useModelWalkSpeed", "use_model_walk_speed", _bool),
    FieldSpec("yawUsesSplineTangent", "yaw_uses_spline_tangent", _bool),
    FieldSpec("yawUsesNodeTransform", "yaw_uses_node_transform", _bool),
    FieldSpec("yawBlendDisabled", "yaw_blend_disabled", _bool),
    FieldSpec("pitchUsesSplineTangent", "pitch_uses_spline_tangent", _bool),
    FieldSpec("pitchUsesNodeTransform", "pitch_uses_node_transform", _bool),
    FieldSpec("rollUsesNodeTransform", "roll_uses_node_transform", _bool),
)


# ---------------------------------------------------------------------------
# Traversal helpers
# ---------------------------------------------------------------------------


def _is_field_name(key: Value, fmt: NumberFormat) -> bool:
    if not isinstance(key, String):
        return False
    try:
        fmt.parse_float(key.value)
    except NumberFormatError:
        return True
    return False


def is_record(table: Table, fmt: NumberFormat) -> bool:
    """True when every key of a non-empty *table* is a field name.

    Numeric strings count as time keys, so ``{ ["1.5"] = {...} }`` stays a
    wrapper group.
    """
    return len(table) > 0 and all(_is_field_name(key, fmt) for key in table.keys())


def iter_records(
    events: Table, path: str, fmt: NumberFormat
) -> Iterator[Tuple[Value, Value, str]]:
    """Yield ``(key, record, record_path)`` for direct and wrapped entries."""
    for outer_key, outer in events:
        outer_path = index(path, outer_key)
        outer_table = to_table(outer, outer_path)
        if is_record(outer_table, fmt):
            yield outer_key, outer_table, outer_path
            continue
        for key, record in outer_table:
            yield key, record, index(path, key)


def decode_timed(
    events: Table,
    path: str,
    options: DecoderOptions,
    decode_record: RecordDecoder,
) -> Dict[float, Any]:
    result: Dict[float, Any] = {}
    for key, record, record_path in iter_records(events, path, options.number_format):
        time = to_time(key, record_path, options.number_format)
        result[time] = decode_record(to_table(record, record_path), record_path, options)
    return result


def _coerce_fields(
    table: Table, specs: Sequence[FieldSpec], path: str, options: DecoderOptions
) -> Dict[str, Any]:
    fmt = options.number_format
    return {
        spec.attr: spec.coerce(table.get(spec.name), child(path, spec.name), fmt)
        for spec in specs
        if spec.name in table
    }


def _coerce_open_fields(
    table: Table, specs: Sequence[FieldSpec], path: str, options: DecoderOptions
) -> Dict[str, Any]:
    """Coerce any subset of *specs*; unknown names raise ``UnhandledField``."""
    by_name = {spec.name: spec for spec in specs}
    fmt = options.number_format
    values: Dict[str, Any] = {}
    for key, value in table:
        name = key_text(key)
        spec = by_name.get(name) if isinstance(key, String) else None
        if spec is None:
            raise UnhandledField(name, path=child(path, name), value=value)
        values[spec.attr] = spec.coerce(value, child(path, name), fmt)
    return values


def flat_record(event_type: type, specs: Sequence[FieldSpec]) -> RecordDecoder:
    """Build a decoder for a record holding exactly the fields in *specs*."""
    names = tuple(spec.name for spec in specs)

    def decode_record(table: Table, path: str, options: DecoderOptions) -> Any:
        expect_fields(table, names, path)
        return event_type(**_coerce_fields(table, specs, path, options))

    return decode_record


def _single_table_field(table: Table, name: str, path: str) -> Tuple[Table, str]:
    expect_fields(table, (name,), path)
    field_path = child(path, name)
    return to_table(table.get(name), field_path), field_path


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------

_decode_music_record = flat_record(MusicEvent, MUSIC_FIELDS)
_decode_ground_snap_record = flat_record(GroundSnapEvent, GROUND_SNAP_FIELDS)
_decode_custom_script_record = flat_record(CustomScriptEvent, CUSTOM_SCRIPT_FIELDS)
_decode_scale_record = flat_record(ScaleEvent, SCALE_FIELDS)
_decode_fade_record = flat_record(FadeEvent, FADE_FIELDS)
_decode_fade_region_record = flat_record(FadeRegionEvent, FADE_REGION_FIELDS)
_decode_sheathe_record = flat_record(SheatheEvent, SHEATHE_FIELDS)
_decode_equip_weapon_record = flat_record(EquipWeaponEvent, EQUIP_WEAPON_FIELDS)


def decode_music(events: Table, path: str, options: DecoderOptions) -> Property[MusicEvent]:
    return Property(decode_timed(events, path, options, _decode_music_record))


def decode_ground_snap(
    events: Table, path: str, options: DecoderOptions
) -> Property[GroundSnapEvent]:
    return Property(decode_timed(events, path, options, _decode_ground_snap_record))


def decode_custom_script(
    events: Table, path: str, options: DecoderOptions
) -> Property[CustomScriptEvent]:
    return Property(decode_timed(events, path, options, _decode_custom_script_record))


def decode_scale(events: Table, path: str, options: DecoderOptions) -> Property[ScaleEvent]:
    return Property(decode_timed(events, path, options, _decode_scale_record))


def decode_fade(events: Table, path: str, options: DecoderOptions) -> Property[FadeEvent]:
    return Property(decode_timed(events, path, options, _decode_fade_record))


def decode_fade_region(
    events: Table, path: str, options: DecoderOptions
) -> Property[FadeRegionEvent]:
    return Property(decode_timed(events, path, options, _decode_fade_region_record))


def decode_sheathe(
    events: Table, path: str, options: DecoderOptions
) -> Property[SheatheEvent]:
    return Property(decode_timed(events, path, options, _decode_sheathe_record))


def decode_equip_weapon(
    events: Table, path: str, options: DecoderOptions
) -> Property[EquipWeaponEvent]:
    return Property(decode_timed(events, path, options, _decode_equip_weapon_record))


def _decode_transform_record(table: Table, path: str, options: DecoderOptions) -> Transform:
    transform, transform_path = _single_table_field(table, "transform", path)
    return decode_transform(transform, transform_path, options)


def decode_transform_property(
    events: Table, path: str, options: DecoderOptions
) -> Property[Transform]:
    return Property(decode_timed(events, path, options, _decode_transform_record))


def _decode_appearance_record(
    table: Table, path: str, options: DecoderOptions
) -> AppearanceEvent:
    return AppearanceEvent(**_coerce_open_fields(table, APPEARANCE_FIELDS, path, options))


def decode_appearance(
    events: Table, path: str, options: DecoderOptions
) -> Property[AppearanceEvent]:
    return Property(decode_timed(events, path, options, _decode_appearance_record))


def _decode_spline_node(table: Table, path: str, options: DecoderOptions) -> Transform:
    node, node_path = _single_table_field(table, "position", path)
    return decode_placement(node, node_path, options)


def decode_move_spline(
    events: Table, path: str, options: DecoderOptions
) -> MoveSplineProperty:
    """Decode spline nodes and the movement flags block.

    Both live under the same ``events`` table; a table key marks the flags
    block and a time key (number or numeric string, as for every other kind)
    marks a node.
    """
    flags: Dict[str, Any] = {}
    nodes: Dict[float, Transform] = {}
    fmt = options.number_format
    for key, record, record_path in iter_records(events, path, fmt):
        record_table = to_table(record, record_path)
        if isinstance(key, Table):
            flags.update(
                _coerce_open_fields(record_table, MOVE_SPLINE_FLAGS, record_path, options)
            )
        elif isinstance(key, (Number, String)):
            time = to_time(key, record_path, fmt)
            nodes[time] = _decode_spline_node(record_table, record_path, options)
        else:
            raise TypeMismatch("time (number) or flags (table) key", key, path=record_path)
    return MoveSplineProperty(events=nodes, **flags)
