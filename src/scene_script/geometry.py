"""Position and transform decoders shared by several property kinds."""

from __future__ import annotations

from scene_script.coerce import to_float, to_table
from scene_script.config import DecoderOptions
from scene_script.model import Position, Transform
from scene_script.paths import child
from scene_script.shapes import expect_keys
from scene_script.values import String, Table

POSITION_KEYS = ("x", "y", "z")
TRANSFORM_KEYS = ("position", "yaw", "pitch", "roll")


def decode_position(table: Table, path: str, options: DecoderOptions) -> Position:
    expect_keys(table, POSITION_KEYS, path, ordered_first=True)
    fmt = options.number_format
    return Position(
        x=to_float(table.get("x"), child(path, "x"), fmt),
        y=to_float(table.get("y"), child(path, "y"), fmt),
        z=to_float(table.get("z"), child(path, "z"), fmt),
    )


def decode_transform(table: Table, path: str, options: DecoderOptions) -> Transform:
    expect_keys(table, TRANSFORM_KEYS, path, ordered_first=True)
    fmt = options.number_format
    position_path = child(path, "position")
    return Transform(
        position=decode_position(
            to_table(table.get("position"), position_path), position_path, options
        ),
        yaw=to_float(table.get("yaw"), child(path, "yaw"), fmt),
        pitch=to_float(table.get("pitch"), child(path, "pitch"), fmt),
        roll=to_float(table.get("roll"), child(path, "roll"), fmt),
    )


def decode_placement(table: Table, path: str, options: DecoderOptions) -> Transform:
    """Decode a spline node: a full transform, or a bare position.

    A bare position decodes with zero rotation.
    """
    if table.first_key() == String("x"):
        return Transform(position=decode_position(table, path, options))
    return decode_transform(table, path, options)
