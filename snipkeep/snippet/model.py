from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from ..errors import LanguageLookupMiss
from ..language import DEFAULT_EXTENSION, DEFAULT_LANGUAGES, LanguageTable, derive_extension

BOX = "■"

EDITABLE_FIELDS = frozenset({"description", "language", "tags", "code", "date", "source"})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def split_tags(tags: str) -> list[str]:
    """Split a whitespace separated tag string, dropping empty entries."""
    return tags.split()


def normalize_language(language: str) -> str:
    return language.strip().lower()


class Snippet(BaseModel):
    """One recorded piece of code with its metadata.

    ``extension`` is derived from ``language``. When a ``languages`` table is
    passed in the validation context (which :meth:`new`, :meth:`create` and
    :meth:`edited` always do) it is recomputed and any supplied value is
    ignored; without a table a persisted value is kept as it was written.
    """

    index: int = Field(0, ge=0)
    description: str
    language: str
    code: str = ""
    extension: str = DEFAULT_EXTENSION
    tags: tuple[str, ...] = ()
    date: datetime
    updated: datetime
    source: str | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _fill_derived(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        if "date" not in data or data["date"] is None:
            data["date"] = utcnow()
        if "updated" not in data or data["updated"] is None:
            data["updated"] = data["date"]

        language = data.get("language")
        context = info.context or {}
        languages: LanguageTable | None = context.get("languages")
        if isinstance(language, str):
            if languages is not None:
                data["extension"] = derive_extension(
                    normalize_language(language),
                    languages,
                    on_miss=context.get("on_miss"),
                )
            elif not data.get("extension"):
                data["extension"] = derive_extension(normalize_language(language), DEFAULT_LANGUAGES)
        return data

    @field_validator("language")
    @classmethod
    def _normalize_language(cls, value: str) -> str:
        return normalize_language(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return split_tags(value)
        if isinstance(value, (list, tuple)):
            tags: list[Any] = []
            for tag in value:
                tags.extend(split_tags(tag) if isinstance(tag, str) else [tag])
            return tags
        return value

    @field_validator("date", "updated")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def _check_timestamps(self) -> "Snippet":
        if self.updated < self.date:
            raise ValueError(
                f"updated ({self.updated.isoformat()}) is earlier than date ({self.date.isoformat()})"
            )
        return self

    @classmethod
    def new(
        cls,
        index: int,
        description: str,
        language: str,
        tags: str,
        date: datetime,
        updated: datetime,
        code: str,
        *,
        languages: LanguageTable = DEFAULT_LANGUAGES,
        source: str | None = None,
        on_miss: Callable[[LanguageLookupMiss], None] | None = None,
    ) -> "Snippet":
        """Build a snippet from raw collected values; ``tags`` is one string."""
        return cls.model_validate(
            {
                "index": index,
                "description": description,
                "language": language,
                "tags": split_tags(tags),
                "date": date,
                "updated": updated,
                "code": code,
                "source": source,
            },
            context={"languages": languages, "on_miss": on_miss},
        )

    @classmethod
    def create(
        cls,
        index: int,
        description: str,
        language: str,
        tags: str = "",
        code: str = "",
        *,
        languages: LanguageTable = DEFAULT_LANGUAGES,
        date: datetime | None = None,
        on_miss: Callable[[LanguageLookupMiss], None] | None = None,
    ) -> "Snippet":
        """Record a new snippet now, or at ``date`` when one is supplied."""
        now = utcnow()
        created = as_utc(date) if date is not None else now
        return cls.new(
            index,
            description,
            language,
            tags,
            created,
            max(now, created),
            code,
            languages=languages,
            on_miss=on_miss,
        )

    def edited(
        self,
        *,
        languages: LanguageTable = DEFAULT_LANGUAGES,
        on_miss: Callable[[LanguageLookupMiss], None] | None = None,
        **changes: Any,
    ) -> "Snippet":
        """Return a copy with ``changes`` applied, the same index and a fresh ``updated``."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise TypeError(f"Cannot edit snippet fields: {', '.join(sorted(unknown))}")

        data = self.model_dump()
        data.update(changes)
        data["index"] = self.index
        data.pop("extension", None)
        date = as_utc(data["date"])
        data["date"] = date
        data["updated"] = max(utcnow(), date)
        return type(self).model_validate(data, context={"languages": languages, "on_miss": on_miss})

    def in_date_range(self, from_date: datetime, to_date: datetime) -> bool:
        """True when ``from_date <= date < to_date``."""
        return as_utc(from_date) <= self.date < as_utc(to_date)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def get_header(self) -> str:
        """Plain text title, used by search integrations."""
        return f"{BOX} #{self.index}. {self.description} | {self.language} :{':'.join(self.tags)}:\n"


__all__ = [
    "BOX",
    "EDITABLE_FIELDS",
    "Snippet",
    "as_utc",
    "normalize_language",
    "split_tags",
    "utcnow",
]
