"""Snippet persistence on top of a byte store."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import IO, Any, Callable, Iterable, List

from ..codec import ImportResult, decode_binary, encode_binary, export_snippets, read_json
from ..errors import DecodeError
from ..exception_handler import ErrorHandler
from ..language import DEFAULT_LANGUAGES, LanguageTable
from ..snippet import Snippet
from .base import SnippetStore

logger = logging.getLogger("snipkeep")


class SnippetRepository:
    """Create, edit, list, import and export snippets kept in a ``SnippetStore``."""

    def __init__(
        self,
        store: SnippetStore,
        *,
        languages: LanguageTable = DEFAULT_LANGUAGES,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self.store = store
        self.languages = languages
        self.error_handler = error_handler or ErrorHandler()

    def add(
        self,
        description: str,
        language: str,
        tags: str = "",
        code: str = "",
        *,
        date: datetime | None = None,
    ) -> Snippet:
        snippet = Snippet.create(
            self.store.next_index(),
            description,
            language,
            tags,
            code,
            languages=self.languages,
            date=date,
        )
        self.save(snippet)
        logger.info("Added snippet #%d", snippet.index)
        return snippet

    def save(self, snippet: Snippet) -> None:
        self.store.put(snippet.index, encode_binary(snippet))

    def get(self, index: int) -> Snippet | None:
        payload = self.store.get(index)
        if payload is None:
            return None
        return decode_binary(payload)

    def edit(self, index: int, **changes: Any) -> Snippet:
        current = self.get(index)
        if current is None:
            raise KeyError(f"Unknown snippet index: {index}")
        snippet = current.edited(languages=self.languages, **changes)
        self.save(snippet)
        logger.info("Edited snippet #%d", index)
        return snippet

    def delete(self, index: int) -> bool:
        deleted = self.store.delete(index)
        if deleted:
            logger.info("Deleted snippet #%d", index)
        return deleted

    def list_snippets(self) -> List[Snippet]:
        """Every readable snippet in index order; corrupt records are reported and skipped."""
        snippets: List[Snippet] = []
        for index, payload in self.store.scan():
            try:
                snippets.append(decode_binary(payload))
            except DecodeError as exc:
                self.error_handler.collect_store_error(exc, index, "decode")
        return snippets

    def import_stream(
        self,
        stream: IO[Any],
        *,
        source: str = "stream",
        on_record: Callable[[ImportResult], None] | None = None,
    ) -> List[Snippet]:
        """Add every valid record of a JSON export under a fresh index."""
        imported: List[Snippet] = []
        for result in read_json(stream):
            if on_record is not None:
                on_record(result)
            if not result.ok:
                self.error_handler.collect_record_error(result.error, source, result.record)
                continue
            record = result.unwrap().model_dump()
            record["index"] = self.store.next_index()
            snippet = Snippet.model_validate(record, context={"languages": self.languages})
            self.save(snippet)
            imported.append(snippet)
        logger.info("Imported %d snippets from %s", len(imported), source)
        return imported

    def export_stream(self, stream: IO[Any], snippets: Iterable[Snippet] | None = None) -> int:
        return export_snippets(self.list_snippets() if snippets is None else snippets, stream)


__all__ = ["SnippetRepository"]
