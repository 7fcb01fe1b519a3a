"""Binary store encoding and streamed JSON import/export."""

from .binary import LEGACY_SCHEMA_VERSION, SCHEMA_VERSION, decode_binary, encode_binary
from .stream import ImportResult, export_snippets, import_snippets, read_json, write_json

__all__ = [
    "ImportResult",
    "LEGACY_SCHEMA_VERSION",
    "SCHEMA_VERSION",
    "decode_binary",
    "encode_binary",
    "export_snippets",
    "import_snippets",
    "read_json",
    "write_json",
]
