"""Shared pytest fixtures for scene-script tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from scene_script.values import from_python


def build_root(properties: dict, actor: str = "Bob"):
    """Value tree for a script with one actor holding *properties*.

    *properties* maps kind name -> plain events data, e.g.
    ``{"Scale": [{0.0: {"scale": 1.0, "duration": 2.5}}]}``.
    """
    return from_python(
        {
            "actors": {
                actor: {
                    "properties": {
                        kind: {"events": events} for kind, events in properties.items()
                    }
                }
            }
        }
    )


def events_table(groups: list):
    """Value table for an ``events`` entry: a list of ``{time: record}`` groups."""
    return from_python(groups)


MINIMAL_SCRIPT = """\
{
    actors = {
        ["Bob"] = {
            properties = {
                Scale = {
                    events = {
                        { [0.0] = { scale = 1.0, duration = 2.5 } },
                    },
                },
            },
        },
    },
}
"""


@pytest.fixture()
def root_builder():
    return build_root


@pytest.fixture()
def script_file(tmp_path: Path):
    """Factory fixture: write script text to a uniquely-named file, return the Path."""
    counter = {"n": 0}

    def _make(text: str = MINIMAL_SCRIPT) -> Path:
        counter["n"] += 1
        p = tmp_path / f"scene_{counter['n']}.lua"
        p.write_text(text, encoding="utf-8")
        return p

    return _make
