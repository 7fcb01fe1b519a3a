from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


@dataclass(frozen=True, slots=True)
class TextStyle:
    """Display attributes of a run. ``color`` is ``#RRGGBB`` or ``None``."""

    color: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    reset: bool = False


RESET = TextStyle(reset=True)


class Run(NamedTuple):
    """A span of text with exactly one style; ``None`` means unstyled."""

    text: str
    style: TextStyle | None = None


def reset_run() -> Run:
    return Run("", RESET)


__all__ = ["RESET", "Run", "TextStyle", "reset_run"]
