from datetime import datetime, timezone

import pytest

from snipkeep.codec.binary import LEGACY_SCHEMA_VERSION, decode_binary, encode_binary
from snipkeep.errors import DecodeError
from snipkeep.snippet import Snippet


def _make_snippet(**overrides):
    values = {
        "index": 1,
        "description": "add two numbers",
        "language": "rust",
        "tags": "math demo",
        "date": datetime(2023, 1, 1, 8, 30, 15, 123456, tzinfo=timezone.utc),
        "updated": datetime(2023, 2, 1, 9, 0, 0, 999999, tzinfo=timezone.utc),
        "code": "fn add(a,b){a+b}",
    }
    values.update(overrides)
    return Snippet.new(**values)


@pytest.mark.parametrize(
    "overrides",
    [
        {},
        {"tags": "", "code": ""},
        {"description": "ünïcødé ■", "code": "print('héllo')\n\ttabbed\n"},
        {"source": "stack overflow"},
        {"index": 2**40},
    ],
)
def test_round_trip_is_exact(overrides):
    snippet = _make_snippet(**overrides)

    decoded = decode_binary(encode_binary(snippet))

    assert decoded == snippet
    assert decoded.date == snippet.date
    assert decoded.updated.microsecond == 999999
    assert decoded.tags == snippet.tags


def test_legacy_layout_decodes_with_updated_equal_to_date():
    snippet = _make_snippet(source="from a blog")

    decoded = decode_binary(encode_binary(snippet, version=LEGACY_SCHEMA_VERSION))

    assert decoded.source == "from a blog"
    assert decoded.updated == decoded.date == snippet.date
    assert decoded.code == snippet.code


def test_truncated_payload_fails():
    payload = encode_binary(_make_snippet())

    for cut in (0, 1, 3, 10, len(payload) - 1):
        with pytest.raises(DecodeError):
            decode_binary(payload[:cut])


def test_trailing_bytes_fail():
    with pytest.raises(DecodeError):
        decode_binary(encode_binary(_make_snippet()) + b"\x00")


def test_bad_magic_and_version_fail():
    payload = encode_binary(_make_snippet())

    with pytest.raises(DecodeError):
        decode_binary(b"XX" + payload[2:])
    with pytest.raises(DecodeError):
        decode_binary(payload[:2] + b"\x09" + payload[3:])


def test_invalid_utf8_fails():
    payload = bytearray(encode_binary(_make_snippet(description="abc")))
    start = payload.index(b"abc")
    payload[start] = 0xFF

    with pytest.raises(DecodeError):
        decode_binary(bytes(payload))


def test_legacy_bytes_read_as_current_layout_fail_cleanly():
    legacy = encode_binary(_make_snippet(), version=LEGACY_SCHEMA_VERSION)
    relabelled = legacy[:2] + b"\x02" + legacy[3:]

    with pytest.raises(DecodeError):
        decode_binary(relabelled)
