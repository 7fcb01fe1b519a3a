from __future__ import annotations

from typing import Dict, Iterator, Protocol, Tuple


class SnippetStore(Protocol):
    """Byte store keyed by snippet index."""

    def get(self, index: int) -> bytes | None: ...

    def put(self, index: int, payload: bytes) -> None: ...

    def delete(self, index: int) -> bool: ...

    def scan(self) -> Iterator[Tuple[int, bytes]]: ...

    def next_index(self) -> int: ...


class MemorySnippetStore:
    """Dictionary backed store for tests and dry runs."""

    def __init__(self) -> None:
        self.records: Dict[int, bytes] = {}
        self.counter = 0

    def get(self, index: int) -> bytes | None:
        return self.records.get(index)

    def put(self, index: int, payload: bytes) -> None:
        self.records[index] = payload
        self.counter = max(self.counter, index)

    def delete(self, index: int) -> bool:
        return self.records.pop(index, None) is not None

    def scan(self) -> Iterator[Tuple[int, bytes]]:
        for index in sorted(self.records):
            yield index, self.records[index]

    def next_index(self) -> int:
        self.counter += 1
        return self.counter


__all__ = ["MemorySnippetStore", "SnippetStore"]
