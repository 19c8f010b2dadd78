"""Byte-stable JSON output writer."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union


def dump_json(data: Any) -> str:
    """Serialize *data* the same way on every run and every platform.

    - sort_keys=True   → no dict ordering non-determinism
    - ensure_ascii=True → no locale-dependent unicode variation
    - allow_nan=False  → NaN/Infinity are not JSON and are refused
    - single trailing "\\n"
    """
    return json.dumps(data, sort_keys=True, indent=2, ensure_ascii=True, allow_nan=False) + "\n"


def write_json(data: Any, path: Union[str, Path]) -> None:
    """Write *data* to *path* with Unix line endings, creating parent dirs."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(dump_json(data), encoding="utf-8", newline="\n")
