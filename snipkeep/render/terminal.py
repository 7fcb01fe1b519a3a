"""Turn styled runs into ANSI escape sequences."""

from __future__ import annotations

import re
from typing import IO, Iterable

from .styles import Run, TextStyle

END_ANSI = "\x1b[0m"

_HEX_COLOR = re.compile(r"#?([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})")


def _sgr(style: TextStyle) -> str:
    codes = []
    if style.bold:
        codes.append("1")
    if style.italic:
        codes.append("3")
    if style.underline:
        codes.append("4")
    match = _HEX_COLOR.fullmatch(style.color or "")
    if match:
        red, green, blue = (int(part, 16) for part in match.groups())
        codes.append(f"38;2;{red};{green};{blue}")
    if not codes:
        return ""
    return f"\x1b[{';'.join(codes)}m"


def to_ansi(runs: Iterable[Run]) -> str:
    parts = []
    styled = False
    for text, style in runs:
        if style is not None and style.reset:
            parts.append(END_ANSI + text)
            styled = False
            continue
        if styled:
            parts.append(END_ANSI)
            styled = False
        if style is not None:
            escape = _sgr(style)
            if escape:
                parts.append(escape)
                styled = True
        parts.append(text)
    return "".join(parts)


def to_plain(runs: Iterable[Run]) -> str:
    return "".join(run.text for run in runs)


def write_runs(runs: Iterable[Run], stream: IO[str]) -> None:
    stream.write(to_ansi(runs))


__all__ = ["END_ANSI", "to_ansi", "to_plain", "write_runs"]
