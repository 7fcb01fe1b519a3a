"""Exception types shared by the snippet codecs and renderers."""

from __future__ import annotations


class SnippetError(Exception):
    """Base class for every error raised by snipkeep."""


class DecodeError(SnippetError):
    """A stored binary payload is truncated, corrupt or of an unknown layout."""


class ExportError(SnippetError):
    """Writing a snippet record to an export stream failed."""


class SnippetImportError(SnippetError):
    """One record of an import stream could not be turned into a snippet."""

    def __init__(self, message: str, *, record: int, offset: int) -> None:
        super().__init__(message)
        self.record = record
        self.offset = offset

    def __str__(self) -> str:
        return f"record {self.record} (offset {self.offset}): {self.args[0]}"


class LanguageLookupMiss(SnippetError):
    """A language is missing from the language table. Reported, never raised."""

    def __init__(self, language: str, default_extension: str) -> None:
        super().__init__(
            f"Couldn't find language {language!r} in the language table, "
            f"defaulting to {default_extension}"
        )
        self.language = language
        self.default_extension = default_extension


class HighlightError(SnippetError):
    """No grammar or theme could be resolved for a piece of code."""


__all__ = [
    "DecodeError",
    "ExportError",
    "HighlightError",
    "LanguageLookupMiss",
    "SnippetError",
    "SnippetImportError",
]
