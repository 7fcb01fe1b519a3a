"""Core package for the snippet manager: records, codecs, filters and rendering."""

from .codec import ImportResult, decode_binary, encode_binary, export_snippets, import_snippets, read_json, write_json
from .config import Settings
from .errors import (
    DecodeError,
    ExportError,
    HighlightError,
    LanguageLookupMiss,
    SnippetError,
    SnippetImportError,
)
from .language import DEFAULT_EXTENSION, DEFAULT_LANGUAGES, Language, derive_extension
from .query import filter_by_language, filter_by_tag, filter_in_date_range, filter_snippets
from .render import CodeHighlight, Run, TextStyle, legacy_print, pretty_print, render_snippet
from .snippet import Snippet
from .store import MemorySnippetStore, RedisSnippetStore, SnippetRepository

__all__ = [
    "CodeHighlight",
    "DEFAULT_EXTENSION",
    "DEFAULT_LANGUAGES",
    "DecodeError",
    "ExportError",
    "HighlightError",
    "ImportResult",
    "Language",
    "LanguageLookupMiss",
    "MemorySnippetStore",
    "RedisSnippetStore",
    "Run",
    "Settings",
    "Snippet",
    "SnippetError",
    "SnippetImportError",
    "SnippetRepository",
    "TextStyle",
    "decode_binary",
    "derive_extension",
    "encode_binary",
    "export_snippets",
    "filter_by_language",
    "filter_by_tag",
    "filter_in_date_range",
    "filter_snippets",
    "import_snippets",
    "legacy_print",
    "pretty_print",
    "read_json",
    "render_snippet",
    "write_json",
]
