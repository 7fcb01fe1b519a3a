"""Streamed JSON encoding used for bulk export and import.

Records are written back to back as JSON objects with no enclosing array and
no separators, so an export can be appended to one snippet at a time. The
reader splits records structurally, not by line.
"""

from __future__ import annotations

import codecs
import io
import json
import logging
import re
from dataclasses import dataclass
from typing import IO, Any, Iterable, Iterator

from pydantic import ValidationError

from ..errors import ExportError, SnippetImportError
from ..exception_handler import ErrorHandler
from ..snippet import Snippet
from .binary import LEGACY_SCHEMA_VERSION, SCHEMA_VERSION

logger = logging.getLogger("snipkeep")

CHUNK_SIZE = 64 * 1024

_WHITESPACE = re.compile(r"\s*")

# Longest token that can fail part way: "Infinity", or a "\uXXXX" escape.
_TRUNCATION_WINDOW = 8


def _maybe_truncated(exc: json.JSONDecodeError, length: int) -> bool:
    """Whether more input could turn this decode failure into a success."""
    if exc.pos >= length - _TRUNCATION_WINDOW:
        return True
    return exc.msg.startswith("Unterminated string")


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Outcome of decoding one record: a snippet or the error that replaced it."""

    record: int
    snippet: Snippet | None = None
    error: SnippetImportError | None = None

    def __post_init__(self) -> None:
        if (self.snippet is None) == (self.error is None):
            raise ValueError("ImportResult needs exactly one of snippet or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Snippet:
        if self.error is not None:
            raise self.error
        if self.snippet is None:
            raise ValueError(f"record {self.record} has no snippet")
        return self.snippet


def _is_binary(stream: IO[Any]) -> bool:
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    mode = getattr(stream, "mode", "")
    return isinstance(mode, str) and "b" in mode


def snippet_to_record(snippet: Snippet) -> dict[str, Any]:
    record: dict[str, Any] = {"schema": SCHEMA_VERSION}
    record.update(snippet.model_dump(mode="json", exclude_none=True))
    return record


def snippet_from_record(record: Any) -> Snippet:
    """Validate one decoded JSON object, resolving its schema version."""
    if not isinstance(record, dict):
        raise ValueError(f"expected a JSON object, got {type(record).__name__}")
    data = dict(record)

    schema = data.pop("schema", None)
    if schema is None:
        schema = LEGACY_SCHEMA_VERSION if "source" in data and "updated" not in data else SCHEMA_VERSION
    if isinstance(schema, bool) or schema not in (SCHEMA_VERSION, LEGACY_SCHEMA_VERSION):
        raise ValueError(f"unsupported schema version {schema!r}")
    if schema == LEGACY_SCHEMA_VERSION:
        data.pop("updated", None)

    return Snippet.model_validate(data)


def write_json(snippet: Snippet, stream: IO[Any]) -> None:
    """Append one snippet record to ``stream``."""
    payload = json.dumps(snippet_to_record(snippet), ensure_ascii=False, separators=(",", ":"))
    try:
        stream.write(payload.encode("utf-8") if _is_binary(stream) else payload)
    except OSError as exc:
        raise ExportError(f"Failed to write snippet #{snippet.index}: {exc}") from exc


def read_json(stream: IO[Any], *, chunk_size: int = CHUNK_SIZE) -> Iterator[ImportResult]:
    """Lazily decode the records of ``stream``, one :class:`ImportResult` each.

    A record that parses as JSON but is not a valid snippet yields an error
    result and reading carries on. A JSON syntax error yields an error result
    and ends the sequence, since the next record boundary cannot be found.
    Offsets in errors count characters from the start of the stream.
    """
    decoder = json.JSONDecoder()
    utf8 = codecs.getincrementaldecoder("utf-8")()
    binary = _is_binary(stream)

    buffer = ""
    pos = 0
    base = 0
    record = 0
    eof = False

    def fill() -> bool:
        nonlocal buffer, pos, base, eof
        chunk = stream.read(chunk_size)
        if binary:
            text = utf8.decode(chunk or b"", final=not chunk)
        else:
            text = chunk or ""
        if not chunk:
            eof = True
        base += pos
        buffer = buffer[pos:] + text
        pos = 0
        return bool(text)

    def refill_failed() -> ImportResult | None:
        nonlocal record
        try:
            fill()
        except UnicodeDecodeError as exc:
            record += 1
            return ImportResult(
                record,
                error=SnippetImportError(f"invalid UTF-8: {exc.reason}", record=record, offset=base + pos),
            )
        return None

    while True:
        pos = _WHITESPACE.match(buffer, pos).end()
        if pos >= len(buffer):
            if eof:
                return
            failure = refill_failed()
            if failure is not None:
                yield failure
                return
            continue

        try:
            obj, end = decoder.raw_decode(buffer, pos)
        except json.JSONDecodeError as exc:
            if not eof and _maybe_truncated(exc, len(buffer)):
                failure = refill_failed()
                if failure is not None:
                    yield failure
                    return
                continue
            record += 1
            yield ImportResult(
                record,
                error=SnippetImportError(f"malformed JSON: {exc.msg}", record=record, offset=base + exc.pos),
            )
            return

        # A bare number may continue in the next chunk.
        if end == len(buffer) and not eof and not isinstance(obj, (dict, list, str)):
            failure = refill_failed()
            if failure is not None:
                yield failure
                return
            continue

        record += 1
        offset = base + pos
        pos = end
        try:
            snippet = snippet_from_record(obj)
        except (ValidationError, ValueError) as exc:
            yield ImportResult(record, error=SnippetImportError(str(exc), record=record, offset=offset))
            continue
        yield ImportResult(record, snippet=snippet)


def export_snippets(snippets: Iterable[Snippet], stream: IO[Any]) -> int:
    """Write every snippet to ``stream``. Returns the number of records written."""
    written = 0
    for snippet in snippets:
        write_json(snippet, stream)
        written += 1
    logger.info("Exported %d snippets", written)
    return written


def import_snippets(
    stream: IO[Any],
    *,
    error_handler: ErrorHandler | None = None,
    source: str = "stream",
) -> list[Snippet]:
    """Read every valid snippet from ``stream``, collecting errors for the rest."""
    handler = error_handler or ErrorHandler()
    snippets: list[Snippet] = []
    for result in read_json(stream):
        if result.ok:
            snippets.append(result.unwrap())
        else:
            handler.collect_record_error(result.error, source, result.record)
    logger.info("Imported %d snippets from %s", len(snippets), source)
    return snippets


__all__ = [
    "CHUNK_SIZE",
    "ImportResult",
    "export_snippets",
    "import_snippets",
    "read_json",
    "snippet_from_record",
    "snippet_to_record",
    "write_json",
]
