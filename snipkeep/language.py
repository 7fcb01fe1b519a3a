"""Language metadata: display extension and color per language name."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Annotated, Callable, Mapping

from pydantic import StringConstraints, TypeAdapter, ValidationError

from .errors import LanguageLookupMiss

logger = logging.getLogger("snipkeep")

DEFAULT_EXTENSION = ".txt"
DEFAULT_COLOR = "#FFFFFF"

HexColor = Annotated[str, StringConstraints(pattern=r"^#[0-9A-Fa-f]{6}$")]


@dataclass(frozen=True, slots=True)
class Language:
    """How snippets in one language are highlighted and labelled."""

    extension: str = DEFAULT_EXTENSION
    color: HexColor = DEFAULT_COLOR


LanguageTable = Mapping[str, Language]

# Colors follow GitHub linguist.
DEFAULT_LANGUAGES: LanguageTable = MappingProxyType(
    {
        "bash": Language(".sh", "#89E051"),
        "c": Language(".c", "#555555"),
        "c++": Language(".cpp", "#F34B7D"),
        "cpp": Language(".cpp", "#F34B7D"),
        "c#": Language(".cs", "#178600"),
        "css": Language(".css", "#563D7C"),
        "dockerfile": Language(".dockerfile", "#384D54"),
        "go": Language(".go", "#00ADD8"),
        "haskell": Language(".hs", "#5E5086"),
        "html": Language(".html", "#E34C26"),
        "java": Language(".java", "#B07219"),
        "javascript": Language(".js", "#F1E05A"),
        "json": Language(".json", "#292929"),
        "kotlin": Language(".kt", "#A97BFF"),
        "lua": Language(".lua", "#000080"),
        "markdown": Language(".md", "#083FA1"),
        "perl": Language(".pl", "#0298C3"),
        "php": Language(".php", "#4F5D95"),
        "python": Language(".py", "#3572A5"),
        "r": Language(".r", "#198CE7"),
        "ruby": Language(".rb", "#701516"),
        "rust": Language(".rs", "#DEA584"),
        "scala": Language(".scala", "#C22D40"),
        "shell": Language(".sh", "#89E051"),
        "sql": Language(".sql", "#E38C00"),
        "swift": Language(".swift", "#F05138"),
        "toml": Language(".toml", "#9C4221"),
        "typescript": Language(".ts", "#3178C6"),
        "yaml": Language(".yaml", "#CB171E"),
        "zig": Language(".zig", "#EC915C"),
    }
)

_TABLE_ADAPTER = TypeAdapter(dict[str, Language])


def derive_extension(
    language: str,
    languages: LanguageTable,
    *,
    on_miss: Callable[[LanguageLookupMiss], None] | None = None,
) -> str:
    """Return the extension for ``language``, falling back to ``DEFAULT_EXTENSION``.

    Unknown languages are logged and reported through ``on_miss``; this
    function never raises for a missing entry.
    """
    entry = languages.get(language)
    if entry is not None:
        return entry.extension

    miss = LanguageLookupMiss(language, DEFAULT_EXTENSION)
    logger.warning("%s", miss)
    if on_miss is not None:
        on_miss(miss)
    return DEFAULT_EXTENSION


def get_language(language: str, languages: LanguageTable) -> Language:
    """Return the table entry for ``language`` or the default entry."""
    return languages.get(language) or Language()


def load_languages(path: str | Path, *, base: LanguageTable = DEFAULT_LANGUAGES) -> LanguageTable:
    """Load a JSON language table and merge it over ``base``.

    The file maps language names to ``{"extension": ..., "color": ...}``.
    """
    raw = Path(path).read_text(encoding="utf-8")
    try:
        loaded = _TABLE_ADAPTER.validate_python(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ValueError(f"Invalid language table {path}: {exc}") from exc

    merged = dict(base)
    merged.update({name.strip().lower(): entry for name, entry in loaded.items()})
    logger.debug("Loaded %d languages from %s", len(loaded), path)
    return MappingProxyType(merged)


__all__ = [
    "DEFAULT_COLOR",
    "DEFAULT_EXTENSION",
    "DEFAULT_LANGUAGES",
    "Language",
    "LanguageTable",
    "derive_extension",
    "get_language",
    "load_languages",
]
