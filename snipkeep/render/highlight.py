"""Token coloring backed by pygments."""

from __future__ import annotations

import logging
from typing import Any, List, Protocol

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, get_lexer_for_filename
from pygments.style import Style
from pygments.styles import get_style_by_name
from pygments.token import Token
from pygments.util import ClassNotFound

from ..errors import HighlightError
from ..snippet import BOX
from .styles import Run, TextStyle

logger = logging.getLogger("snipkeep")

DEFAULT_THEME = "monokai"


class Highlighter(Protocol):
    main_style: TextStyle
    accent_style: TextStyle
    tag_style: TextStyle

    def highlight_string(self, text: str, style: TextStyle) -> Run: ...

    def highlight_block(self, color: str) -> Run: ...

    def highlight_code(self, code: str, extension: str) -> List[Run]: ...


def _load_style(theme: str) -> type[Style]:
    try:
        return get_style_by_name(theme)
    except ClassNotFound:
        logger.warning("Unknown highlight theme %s, using %s", theme, DEFAULT_THEME)
        return get_style_by_name(DEFAULT_THEME)


def _token_style(style: type[Style], ttype: Any) -> TextStyle | None:
    attrs = style.style_for_token(ttype)
    color = attrs.get("color")
    text_style = TextStyle(
        color=f"#{color.upper()}" if color else None,
        bold=bool(attrs.get("bold")),
        italic=bool(attrs.get("italic")),
        underline=bool(attrs.get("underline")),
    )
    if text_style == TextStyle():
        return None
    return text_style


def _restore_line_endings(runs: List[Run], code: str) -> List[Run]:
    """Put back the ``\\r\\n`` and ``\\r`` line endings pygments folds into ``\\n``."""
    restored: List[Run] = []
    position = 0
    for text, style in runs:
        parts = []
        for char in text:
            if char == "\n" and code.startswith("\r\n", position):
                parts.append("\r\n")
                position += 2
            elif char == "\n" and code.startswith("\r", position):
                parts.append("\r")
                position += 1
            else:
                parts.append(char)
                position += 1
        restored.append(Run("".join(parts), style))
    return restored


class CodeHighlight:
    """Styles for snippet headers plus pygments token coloring for code."""

    def __init__(self, theme: str = DEFAULT_THEME) -> None:
        self.theme = theme
        self._style = _load_style(theme)
        self.main_style = self._derive(Token.Name.Function, bold=True)
        self.accent_style = self._derive(Token.Keyword)
        self.tag_style = self._derive(Token.Comment, italic=True)
        self._lexers: dict[str, Lexer] = {}

    def _derive(self, ttype: Any, *, bold: bool = False, italic: bool = False) -> TextStyle:
        base = _token_style(self._style, ttype) or TextStyle()
        return TextStyle(color=base.color, bold=bold or base.bold, italic=italic or base.italic)

    @staticmethod
    def highlight_string(text: str, style: TextStyle) -> Run:
        return Run(text, style)

    @staticmethod
    def highlight_block(color: str) -> Run:
        """The leading marker of a header, in the language color."""
        return Run(f"{BOX} ", TextStyle(color=color))

    def _lexer_for(self, extension: str) -> Lexer:
        cached = self._lexers.get(extension)
        if cached is not None:
            return cached
        name = extension.lstrip(".")
        options = {"stripnl": False, "ensurenl": False}
        try:
            lexer = get_lexer_for_filename(f"snippet.{name}", **options)
        except ClassNotFound:
            try:
                lexer = get_lexer_by_name(name, **options)
            except ClassNotFound as exc:
                raise HighlightError(f"No grammar registered for extension {extension!r}") from exc
        self._lexers[extension] = lexer
        return lexer

    def highlight_code(self, code: str, extension: str) -> List[Run]:
        """Split ``code`` into styled runs. Adjacent tokens of one style are merged."""
        lexer = self._lexer_for(extension)
        runs: List[Run] = []
        for ttype, value in lexer.get_tokens(code):
            if not value:
                continue
            style = _token_style(self._style, ttype)
            if runs and runs[-1].style == style:
                runs[-1] = Run(runs[-1].text + value, style)
            else:
                runs.append(Run(value, style))
        if "\r" in code:
            return _restore_line_endings(runs, code)
        return runs


__all__ = ["CodeHighlight", "DEFAULT_THEME", "Highlighter"]
