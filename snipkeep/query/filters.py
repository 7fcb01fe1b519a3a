"""Pure filters over snippet collections. Input order is always preserved."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Sequence

from ..snippet import Snippet, as_utc


def filter_in_date_range(
    snippets: Iterable[Snippet],
    from_date: datetime,
    to_date: datetime,
) -> List[Snippet]:
    """Snippets recorded in ``[from_date, to_date)``."""
    start = as_utc(from_date)
    end = as_utc(to_date)
    if start >= end:
        return []
    return [snippet for snippet in snippets if snippet.in_date_range(start, end)]


def filter_by_tag(snippets: Iterable[Snippet], tag: str) -> List[Snippet]:
    return [snippet for snippet in snippets if snippet.has_tag(tag)]


def filter_by_language(snippets: Iterable[Snippet], language: str) -> List[Snippet]:
    wanted = language.strip().lower()
    return [snippet for snippet in snippets if snippet.language == wanted]


def filter_snippets(
    snippets: Iterable[Snippet],
    *,
    languages: Sequence[str] | None = None,
    tags: Sequence[str] | None = None,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
) -> List[Snippet]:
    """Combine the filters used by listing and export.

    A snippet matches when it is in any of ``languages``, carries any of
    ``tags`` and falls inside the date range. Omitted criteria match
    everything; an open-ended range is bounded only on the given side.
    """
    wanted_languages = {language.strip().lower() for language in languages} if languages else None
    start = as_utc(from_date) if from_date is not None else None
    end = as_utc(to_date) if to_date is not None else None

    selected: List[Snippet] = []
    for snippet in snippets:
        if wanted_languages is not None and snippet.language not in wanted_languages:
            continue
        if tags and not any(snippet.has_tag(tag) for tag in tags):
            continue
        if start is not None and snippet.date < start:
            continue
        if end is not None and snippet.date >= end:
            continue
        selected.append(snippet)
    return selected


__all__ = [
    "filter_by_language",
    "filter_by_tag",
    "filter_in_date_range",
    "filter_snippets",
]
