import io
import json
import logging
from datetime import datetime, timezone

import pytest

from snipkeep.codec.stream import export_snippets
from snipkeep.errors import DecodeError
from snipkeep.exception_handler import ErrorHandler
from snipkeep.language import Language
from snipkeep.snippet import Snippet
from snipkeep.store import MemorySnippetStore, RedisSnippetStore, SnippetRepository


class _FakePipeline:
    def __init__(self, client):
        self.client = client
        self.calls = []

    def set(self, key, value):
        self.calls.append(lambda: self.client.set(key, value))

    def zadd(self, key, mapping):
        self.calls.append(lambda: self.client.zadd(key, mapping))

    def delete(self, key):
        self.calls.append(lambda: self.client.delete(key))

    def zrem(self, key, member):
        self.calls.append(lambda: self.client.zrem(key, member))

    def execute(self):
        return [call() for call in self.calls]


class _FakeRedis:
    def __init__(self):
        self.values = {}
        self.sorted_sets = {}

    def pipeline(self):
        return _FakePipeline(self)

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value):
        self.values[key] = value
        return True

    def delete(self, key):
        return 1 if self.values.pop(key, None) is not None else 0

    def mget(self, keys):
        return [self.values.get(key) for key in keys]

    def zadd(self, key, mapping):
        self.sorted_sets.setdefault(key, {}).update(mapping)
        return len(mapping)

    def zrem(self, key, member):
        return 1 if self.sorted_sets.get(key, {}).pop(member, None) is not None else 0

    def zrange(self, key, start, end):
        members = sorted(self.sorted_sets.get(key, {}).items(), key=lambda item: item[1])
        return [member.encode("utf-8") for member, _ in members]

    def incr(self, key):
        self.values[key] = int(self.values.get(key, 0)) + 1
        return self.values[key]


@pytest.fixture(params=["memory", "redis"])
def store(request):
    if request.param == "memory":
        return MemorySnippetStore()
    return RedisSnippetStore(_FakeRedis(), key_prefix="test:")


def test_add_assigns_increasing_indices(store):
    repository = SnippetRepository(store)

    first = repository.add("first", "python", "a b", "print(1)")
    second = repository.add("second", "rust", "", "fn main() {}")

    assert (first.index, second.index) == (1, 2)
    assert repository.get(1) == first
    assert repository.get(2).extension == ".rs"
    assert repository.get(3) is None


def test_edit_keeps_index(store):
    repository = SnippetRepository(store)
    snippet = repository.add("first", "python", "a", "print(1)")

    edited = repository.edit(snippet.index, code="print(2)", tags="a b")

    assert edited.index == snippet.index
    assert repository.get(snippet.index).code == "print(2)"
    assert repository.get(snippet.index).tags == ("a", "b")
    with pytest.raises(KeyError):
        repository.edit(99, code="")


def test_delete(store):
    repository = SnippetRepository(store)
    snippet = repository.add("first", "python")

    assert repository.delete(snippet.index)
    assert not repository.delete(snippet.index)
    assert repository.list_snippets() == []


def test_list_skips_corrupt_records(store):
    handler = ErrorHandler()
    repository = SnippetRepository(store, error_handler=handler)
    kept = repository.add("kept", "python")
    store.put(5, b"not a snippet")

    assert repository.list_snippets() == [kept]
    assert handler.get_error_summary()["failed_records"][0]["record"] == "snippet #5"
    with pytest.raises(DecodeError):
        repository.get(5)


def test_import_assigns_fresh_indices_and_derives_extension(store):
    languages = {"python": Language(".py3", "#3572A5")}
    repository = SnippetRepository(store, languages=languages)
    repository.add("existing", "python")
    date = datetime(2021, 4, 4, tzinfo=timezone.utc)
    exported = io.StringIO()
    export_snippets([Snippet.new(1, "imported", "python", "x", date, date, "pass")], exported)
    text = exported.getvalue() + json.dumps({"description": "no language"})

    seen = []
    imported = repository.import_stream(io.StringIO(text), source="dump.json", on_record=seen.append)

    assert [snippet.index for snippet in imported] == [2]
    assert imported[0].extension == ".py3"
    assert imported[0].date == date
    assert len(seen) == 2
    assert repository.error_handler.get_error_summary()["total_errors"] == 1


def test_export_stream_round_trips_through_import(store):
    source = SnippetRepository(store)
    source.add("one", "python", "a", "pass")
    source.add("two", "go", "b c", "package main")
    buffer = io.StringIO()

    assert source.export_stream(buffer) == 2

    target = SnippetRepository(MemorySnippetStore())
    imported = target.import_stream(io.StringIO(buffer.getvalue()))
    assert [(s.description, s.tags, s.date) for s in imported] == [
        (s.description, s.tags, s.date) for s in source.list_snippets()
    ]


def test_repository_leaves_logger_level_alone(monkeypatch):
    logger = logging.getLogger("snipkeep")
    monkeypatch.setattr(logger, "level", logging.ERROR)

    SnippetRepository(MemorySnippetStore())

    assert logger.level == logging.ERROR
