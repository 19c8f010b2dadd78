"""Decoder configuration.

Numeric text is parsed with an explicit ``NumberFormat`` rather than the
host locale, so a script decodes identically on every machine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field


class NumberFormatError(ValueError):
    """Raised when text is not a number in the configured format."""


_INT_RE = re.compile(r"^[+-]?\d+$")


@dataclass(frozen=True)
class NumberFormat:
    decimal_separator: str = "."

    def __post_init__(self) -> None:
        if len(self.decimal_separator) != 1 or self.decimal_separator.isdigit():
            raise ValueError(
                f"decimal_separator must be a single non-digit character, "
                f"got {self.decimal_separator!r}"
            )

    def parse_float(self, text: str) -> float:
        raw = text.strip()
        if self.decimal_separator != ".":
            if "." in raw:
                raise NumberFormatError(f"Not a number: {text!r}")
            raw = raw.replace(self.decimal_separator, ".")
        # float() also accepts "inf", "nan" and digit separators; scripts never do
        if not raw or any(c not in "0123456789+-.eE" for c in raw):
            raise NumberFormatError(f"Not a number: {text!r}")
        try:
            return float(raw)
        except ValueError as exc:
            raise NumberFormatError(f"Not a number: {text!r}") from exc

    def parse_int(self, text: str) -> int:
        raw = text.strip()
        if not _INT_RE.match(raw):
            raise NumberFormatError(f"Not an integer: {text!r}")
        return int(raw)


@dataclass(frozen=True)
class DecoderOptions:
    """Options threaded through every decode step.

    ``verbose`` turns on the advisory dump of property kinds the decoder does
    not know; it never changes the decoded result.
    """

    verbose: bool = False
    number_format: NumberFormat = field(default_factory=NumberFormat)


DEFAULT_OPTIONS = DecoderOptions()
