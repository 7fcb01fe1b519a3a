"""Compact binary encoding used for records in the primary store.

Layout (big-endian)::

    magic "SK" | version u8 | index u64 | description | language | code |
    extension | tag count u32, tags... | date i64 (microseconds since epoch) |
    version 2: updated i64, source flag u8 [, source]
    version 1: source flag u8 [, source]

Strings are a u32 byte length followed by UTF-8. Version 1 records predate
``updated``; they decode with ``updated`` equal to ``date``.
"""

from __future__ import annotations

import struct
from datetime import datetime, timedelta, timezone

from pydantic import ValidationError

from ..errors import DecodeError
from ..snippet import Snippet

MAGIC = b"SK"
SCHEMA_VERSION = 2
LEGACY_SCHEMA_VERSION = 1

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_HEADER = struct.Struct(">2sB")
_U8 = struct.Struct(">B")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")
_I64 = struct.Struct(">q")


def _micros(value: datetime) -> int:
    delta = value - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


def _from_micros(value: int) -> datetime:
    return _EPOCH + timedelta(microseconds=value)


def _pack_str(value: str) -> bytes:
    raw = value.encode("utf-8")
    return _U32.pack(len(raw)) + raw


def encode_binary(snippet: Snippet, *, version: int = SCHEMA_VERSION) -> bytes:
    """Encode ``snippet``; ``version=1`` writes the legacy layout without ``updated``."""
    if version not in (SCHEMA_VERSION, LEGACY_SCHEMA_VERSION):
        raise ValueError(f"unsupported schema version {version}")
    parts = [
        _HEADER.pack(MAGIC, version),
        _U64.pack(snippet.index),
        _pack_str(snippet.description),
        _pack_str(snippet.language),
        _pack_str(snippet.code),
        _pack_str(snippet.extension),
        _U32.pack(len(snippet.tags)),
    ]
    parts.extend(_pack_str(tag) for tag in snippet.tags)
    parts.append(_I64.pack(_micros(snippet.date)))
    if version == SCHEMA_VERSION:
        parts.append(_I64.pack(_micros(snippet.updated)))
    if snippet.source is None:
        parts.append(_U8.pack(0))
    else:
        parts.append(_U8.pack(1))
        parts.append(_pack_str(snippet.source))
    return b"".join(parts)


class _Reader:
    def __init__(self, payload: bytes) -> None:
        self.view = memoryview(payload)
        self.offset = 0

    def unpack(self, fmt: struct.Struct) -> int:
        end = self.offset + fmt.size
        if end > len(self.view):
            raise DecodeError(f"truncated payload at byte {self.offset}")
        (value,) = fmt.unpack_from(self.view, self.offset)
        self.offset = end
        return value

    def string(self) -> str:
        length = self.unpack(_U32)
        end = self.offset + length
        if end > len(self.view):
            raise DecodeError(f"truncated string at byte {self.offset}")
        raw = bytes(self.view[self.offset : end])
        self.offset = end
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"invalid UTF-8 at byte {self.offset - length}") from exc

    def optional_string(self) -> str | None:
        flag = self.unpack(_U8)
        if flag == 0:
            return None
        if flag == 1:
            return self.string()
        raise DecodeError(f"invalid optional flag {flag}")

    def finish(self) -> None:
        if self.offset != len(self.view):
            raise DecodeError(f"{len(self.view) - self.offset} trailing bytes after record")


def decode_binary(payload: bytes) -> Snippet:
    """Decode a record written by :func:`encode_binary` or by the legacy layout."""
    if len(payload) < _HEADER.size:
        raise DecodeError("payload too short for header")
    magic, version = _HEADER.unpack_from(payload)
    if magic != MAGIC:
        raise DecodeError(f"bad magic {magic!r}")
    if version not in (SCHEMA_VERSION, LEGACY_SCHEMA_VERSION):
        raise DecodeError(f"unsupported schema version {version}")

    reader = _Reader(payload)
    reader.offset = _HEADER.size
    data: dict[str, object] = {
        "index": reader.unpack(_U64),
        "description": reader.string(),
        "language": reader.string(),
        "code": reader.string(),
        "extension": reader.string(),
    }
    data["tags"] = [reader.string() for _ in range(reader.unpack(_U32))]
    try:
        data["date"] = _from_micros(reader.unpack(_I64))
        if version == SCHEMA_VERSION:
            data["updated"] = _from_micros(reader.unpack(_I64))
    except OverflowError as exc:
        raise DecodeError("timestamp out of range") from exc
    data["source"] = reader.optional_string()
    reader.finish()

    try:
        return Snippet.model_validate(data)
    except ValidationError as exc:
        raise DecodeError(f"incompatible field layout: {exc}") from exc


__all__ = [
    "LEGACY_SCHEMA_VERSION",
    "MAGIC",
    "SCHEMA_VERSION",
    "decode_binary",
    "encode_binary",
]
