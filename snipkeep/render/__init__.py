"""Snippet presentation as styled runs, and their terminal rendering."""

from .highlight import CodeHighlight, DEFAULT_THEME, Highlighter
from .presentation import legacy_print, pretty_print, pretty_print_code, pretty_print_header, render_snippet
from .styles import RESET, Run, TextStyle
from .terminal import to_ansi, to_plain, write_runs

__all__ = [
    "CodeHighlight",
    "DEFAULT_THEME",
    "Highlighter",
    "RESET",
    "Run",
    "TextStyle",
    "legacy_print",
    "pretty_print",
    "pretty_print_code",
    "pretty_print_header",
    "render_snippet",
    "to_ansi",
    "to_plain",
    "write_runs",
]
