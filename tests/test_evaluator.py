"""Tests for script text evaluation and the end-to-end loader."""

from __future__ import annotations

import logging

import pytest

from scene_script.config import DEFAULT_OPTIONS
from scene_script.decoder import load_timeline, load_timeline_file
from scene_script.errors import EvaluationFailure, SceneScriptError, UnhandledProperty
from scene_script.evaluator import evaluate
from scene_script.geometry import decode_position
from scene_script.model import (
    CreatureID,
    FileDataID,
    ItemID,
    Position,
    ScaleEvent,
    Transform,
)
from scene_script.values import Boolean, Number, String, Table


def test_evaluate_literals():
    value = evaluate('{ name = "wave", count = 3, on = true, off = false }')
    assert isinstance(value, Table)
    assert value.get("name") == String("wave")
    assert value.get("count") == Number(3)
    assert value.get("on") == Boolean(True)
    assert value.get("off") == Boolean(False)


def test_evaluate_keeps_source_order():
    value = evaluate("{ position = { x = 1, y = 2, z = 3 }, yaw = 0, pitch = 0, roll = 0 }")
    assert [k.value for k in value.keys()] == ["position", "yaw", "pitch", "roll"]


def test_evaluate_bracketed_and_negative_keys():
    value = evaluate('{ [12.5] = "a", ["Bob"] = "b", [-1] = "c" }')
    assert value.get(12.5) == String("a")
    assert value.get("Bob") == String("b")
    assert value.get(-1) == String("c")


def test_evaluate_positional_fields_numbered_from_one():
    value = evaluate('{ "a", "b" }')
    assert value.get(1) == String("a")
    assert value.get(2) == String("b")


def test_identifier_wrappers_are_identity():
    value = evaluate("{ a = cid(42), b = fid(7), c = gdi(3), d = iid(9), e = wid(1), f = cdiid(2) }")
    assert [v for _, v in value] == [Number(n) for n in (42, 7, 3, 9, 1, 2)]


def test_add_file_data_returns_table():
    value = evaluate('SceneTimelineAddFileData("intro", { actors = {} })')
    assert isinstance(value, Table)
    assert value.keys() == [String("actors")]


def test_repeated_key_keeps_first_position_and_last_value():
    value = evaluate("{ x = 1, y = 0, x = 2, z = 0 }")
    assert [k.value for k in value.keys()] == ["x", "y", "z"]
    assert value.get("x") == Number(2)


def test_repeated_numeric_key_matches_by_value():
    value = evaluate('{ [1] = "a", [1.0] = "b" }')
    assert len(value) == 1
    assert value.get(1) == String("b")


def test_nil_assignment_removes_earlier_entry():
    value = evaluate("{ x = 1, y = 2, x = nil }")
    assert value.keys() == [String("y")]


def test_repeated_coordinate_still_decodes_as_position():
    value = evaluate("{ x = 1, x = 2, y = 0, z = 0 }")
    assert decode_position(value, "p", DEFAULT_OPTIONS) == Position(2.0, 0.0, 0.0)


def test_doc_only_script_is_void():
    assert evaluate("-- documentation only\n") is None


def test_syntax_error_raises_evaluation_failure():
    with pytest.raises(EvaluationFailure):
        evaluate("{ actors = { ")


def test_unknown_function_raises_evaluation_failure():
    with pytest.raises(EvaluationFailure):
        evaluate("{ a = spawn(1) }")


# ---------------------------------------------------------------------------
# load_timeline
# ---------------------------------------------------------------------------

FULL_SCRIPT = """\
{
    actors = {
        ["Bob"] = {
            properties = {
                Appearance = {
                    events = {
                        { [0.0] = { creatureID = cid(42), fileDataID = fid(7), itemID = iid(3) } },
                    },
                },
                MoveSpline = {
                    events = {
                        { [{}] = { overrideSpeed = 4.5, useModelWalkSpeed = true } },
                        { [1.5] = { position = { position = { x = 1.0, y = -2.0, z = 3.0 }, yaw = 0.5, pitch = 0.0, roll = 0.0 } } },
                    },
                },
                Emote = {
                    events = {
                        { [0.0] = { emoteID = 3 } },
                    },
                },
            },
        },
    },
}
"""


def test_load_full_script():
    timeline = load_timeline(FULL_SCRIPT)
    props = timeline.actors["Bob"].properties

    appearance = props.appearance.events[0.0]
    assert appearance.creature_id == CreatureID(42)
    assert appearance.file_data_id == FileDataID(7)
    assert appearance.item_id == ItemID(3)

    spline = props.move_spline
    assert spline.override_speed == 4.5
    assert spline.use_model_walk_speed is True
    assert spline.events[1.5] == Transform(Position(1.0, -2.0, 3.0), yaw=0.5)


SCALE_SCENARIO = (
    '{ actors = { ["Bob"] = { properties = { Scale = { events = '
    "{ [0.0] = { scale = 1.0, duration = 2.5 } } } } } } }"
)


def test_load_scale_scenario_keyed_directly_by_time():
    timeline = load_timeline(SCALE_SCENARIO)
    assert list(timeline.actors) == ["Bob"]
    scale = timeline.actors["Bob"].properties.scale
    assert dict(scale.events) == {0.0: ScaleEvent(scale=1.0, duration=2.5)}


def test_load_unreadable_script_returns_empty_timeline(caplog):
    with caplog.at_level(logging.WARNING, logger="scene_script.decoder"):
        timeline = load_timeline("{ actors = ")
    assert timeline.actors == {}
    assert "could not be evaluated" in caplog.text


def test_load_decode_errors_propagate():
    with pytest.raises(UnhandledProperty):
        load_timeline("{ actors = {}, somethingElse = 1 }")


def test_load_timeline_file(script_file):
    timeline = load_timeline_file(script_file())
    assert list(timeline.actors) == ["Bob"]


def test_load_timeline_file_missing(tmp_path):
    with pytest.raises(SceneScriptError):
        load_timeline_file(tmp_path / "missing.lua")


def test_load_timeline_file_not_utf8(tmp_path):
    path = tmp_path / "latin1.lua"
    path.write_bytes(b'{ actors = { ["Jos\xe9"] = { properties = {} } } }')
    with pytest.raises(SceneScriptError):
        load_timeline_file(path)
