"""CLI entry point for scene-script."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from scene_script.config import DecoderOptions
from scene_script.decoder import decode
from scene_script.errors import DecodeError, EvaluationFailure
from scene_script.evaluator import evaluate
from scene_script.export import ExportError, timeline_to_dict, validate_timeline_dict
from scene_script.model import Timeline
from scene_script.writer import write_json


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load(script_path: str, options: DecoderOptions) -> Timeline:
    """Evaluate and decode a script file, exiting 1 on a decode error.

    A script that cannot be evaluated produces an empty timeline and a
    warning, matching ``scene_script.decoder.load_timeline``.
    """
    try:
        source = Path(script_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        click.echo(f"ERROR: Cannot read scene script: {exc}", err=True)
        sys.exit(1)

    try:
        root = evaluate(source)
    except EvaluationFailure as exc:
        click.echo(f"WARNING: {exc}; treating script as empty", err=True)
        return Timeline.empty()

    try:
        return decode(root, options)
    except DecodeError as exc:
        click.echo(f"ERROR: {exc}", err=True)
        sys.exit(1)


@click.group()
def main() -> None:
    """scene-script: decode cinematic scene scripts into typed timelines."""


@main.command("decode")
@click.option(
    "--script",
    "script_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to the scene script (Lua table literal)",
)
@click.option(
    "--out",
    "out_path",
    required=True,
    type=click.Path(dir_okay=False),
    help="Output path for Timeline.json",
)
@click.option(
    "--verbose",
    is_flag=True,
    default=False,
    help="Log a dump of property kinds the decoder does not support",
)
def decode_script(script_path: str, out_path: str, verbose: bool) -> None:
    """Decode a scene script into a validated Timeline.json."""
    _configure_logging(verbose)
    timeline = _load(script_path, DecoderOptions(verbose=verbose))

    data = timeline_to_dict(timeline)
    try:
        validate_timeline_dict(data)
    except ExportError as exc:
        click.echo(f"ERROR: decoded timeline violates contract: {exc}", err=True)
        sys.exit(1)

    write_json(data, out_path)
    sys.exit(0)


@main.command("inspect")
@click.option(
    "--script",
    "script_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to the scene script (Lua table literal)",
)
@click.option(
    "--verbose",
    is_flag=True,
    default=False,
    help="Log a dump of property kinds the decoder does not support",
)
def inspect(script_path: str, verbose: bool) -> None:
    """Print one summary line per actor."""
    _configure_logging(verbose)
    timeline = _load(script_path, DecoderOptions(verbose=verbose))

    if not timeline.actors:
        click.echo("(no actors)")
    for name in sorted(timeline.actors):
        summary = ", ".join(
            f"{kind.value}({len(prop.events)} events)"
            for kind, prop in timeline.actors[name].properties.present()
        )
        click.echo(f"{name}: {summary or '(no properties)'}")
    sys.exit(0)
