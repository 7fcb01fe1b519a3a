"""Compose snippets into ordered styled runs for terminal display."""

from __future__ import annotations

import logging
from shutil import get_terminal_size
from typing import List

from ..errors import HighlightError
from ..language import DEFAULT_LANGUAGES, Language, LanguageTable, get_language
from ..snippet import Snippet
from .highlight import Highlighter
from .styles import Run, reset_run

logger = logging.getLogger("snipkeep")

FALLBACK_RULE_WIDTH = 40


def pretty_print_header(snippet: Snippet, highlighter: Highlighter, language: Language) -> List[Run]:
    """``■ #index. description | language :tag1:tag2:``

    The block takes the language color, the language the accent style, the
    tags the tag style and everything else the main style.
    """
    return [
        highlighter.highlight_block(language.color),
        highlighter.highlight_string(f"#{snippet.index}. {snippet.description} ", highlighter.main_style),
        highlighter.highlight_string(f"| {snippet.language} ", highlighter.accent_style),
        highlighter.highlight_string(f":{':'.join(snippet.tags)}:\n", highlighter.tag_style),
    ]


def pretty_print_code(snippet: Snippet, highlighter: Highlighter) -> List[Run]:
    """Highlighted code, or the raw code unstyled when no grammar matches."""
    try:
        return highlighter.highlight_code(snippet.code, snippet.extension)
    except HighlightError as exc:
        logger.warning("Showing snippet #%d as plain text: %s", snippet.index, exc)
        return [Run(snippet.code)]


def pretty_print(snippet: Snippet, highlighter: Highlighter, language: Language) -> List[Run]:
    runs = [Run("\n")]
    runs.extend(pretty_print_header(snippet, highlighter, language))
    runs.append(Run("\n"))
    runs.extend(pretty_print_code(snippet, highlighter))
    runs.append(Run("\n\n"))
    runs.append(reset_run())
    return runs


def rule_width() -> int:
    columns = get_terminal_size(fallback=(0, 0)).columns
    if columns <= 0:
        return FALLBACK_RULE_WIDTH
    return columns // 2


def legacy_print(snippet: Snippet, highlighter: Highlighter, *, width: int | None = None) -> List[Run]:
    """Single-line header form used before tags moved into the header."""
    runs = [highlighter.highlight_string(f"#{snippet.index}. {snippet.description}\n", highlighter.main_style)]
    runs.extend(pretty_print_code(snippet, highlighter))
    runs.append(
        highlighter.highlight_string(
            f"{snippet.language} | {', '.join(snippet.tags)} | {snippet.source or ''}\n",
            highlighter.accent_style,
        )
    )
    runs.append(Run("-" * (rule_width() if width is None else width) + "\n"))
    runs.append(reset_run())
    return runs


def render_snippet(
    snippet: Snippet,
    highlighter: Highlighter,
    languages: LanguageTable = DEFAULT_LANGUAGES,
    *,
    legacy: bool = False,
    width: int | None = None,
) -> List[Run]:
    if legacy:
        return legacy_print(snippet, highlighter, width=width)
    return pretty_print(snippet, highlighter, get_language(snippet.language, languages))


__all__ = [
    "FALLBACK_RULE_WIDTH",
    "legacy_print",
    "pretty_print",
    "pretty_print_code",
    "pretty_print_header",
    "render_snippet",
    "rule_width",
]
