from datetime import datetime, timezone

from snipkeep.query import filter_by_language, filter_by_tag, filter_in_date_range, filter_snippets
from snipkeep.snippet import Snippet


def _at(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


def _make_snippet(index, date, *, language="python", tags="demo"):
    return Snippet.new(index, f"snippet {index}", language, tags, date, date, "pass")


def _collection():
    return [
        _make_snippet(1, _at(2023, 1, 1), tags="math demo"),
        _make_snippet(2, _at(2023, 6, 1), language="rust", tags="demo"),
        _make_snippet(3, _at(2022, 12, 31), language="Rust", tags="Math"),
        _make_snippet(4, _at(2023, 3, 15), tags=""),
    ]


def test_date_range_example_returns_first_only():
    snippets = [_make_snippet(1, _at(2023, 1, 1)), _make_snippet(2, _at(2023, 6, 1))]

    result = filter_in_date_range(snippets, _at(2023, 1, 1), _at(2023, 6, 1))

    assert [snippet.index for snippet in result] == [1]


def test_date_range_preserves_order():
    result = filter_in_date_range(_collection(), _at(2022, 1, 1), _at(2024, 1, 1))

    assert [snippet.index for snippet in result] == [1, 2, 3, 4]


def test_empty_and_inverted_ranges():
    assert filter_in_date_range(_collection(), _at(2023, 1, 1), _at(2023, 1, 1)) == []
    assert filter_in_date_range(_collection(), _at(2024, 1, 1), _at(2022, 1, 1)) == []


def test_naive_bounds_are_utc():
    result = filter_in_date_range(_collection(), datetime(2023, 1, 1), datetime(2023, 3, 16))

    assert [snippet.index for snippet in result] == [1, 4]


def test_filter_by_tag_is_case_sensitive():
    assert [snippet.index for snippet in filter_by_tag(_collection(), "math")] == [1]
    assert [snippet.index for snippet in filter_by_tag(_collection(), "Math")] == [3]
    assert filter_by_tag([], "math") == []


def test_filter_by_language_normalizes_query():
    assert [snippet.index for snippet in filter_by_language(_collection(), "RUST")] == [2, 3]


def test_filter_snippets_combines_criteria():
    collection = _collection()

    assert filter_snippets(collection) == collection
    assert [s.index for s in filter_snippets(collection, tags=["math", "Math"])] == [1, 3]
    assert [s.index for s in filter_snippets(collection, languages=["rust"], from_date=_at(2023, 1, 1))] == [2]
    assert [s.index for s in filter_snippets(collection, to_date=_at(2023, 1, 1))] == [3]


def test_filters_do_not_mutate_input():
    collection = _collection()
    snapshot = list(collection)

    filter_snippets(collection, tags=["demo"])
    filter_in_date_range(collection, _at(2023, 1, 1), _at(2023, 2, 1))

    assert collection == snapshot
