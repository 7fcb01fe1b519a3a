from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from snipkeep.errors import LanguageLookupMiss
from snipkeep.language import DEFAULT_EXTENSION, Language, derive_extension
from snipkeep.snippet import Snippet

JAN = datetime(2023, 1, 1, tzinfo=timezone.utc)
JUN = datetime(2023, 6, 1, tzinfo=timezone.utc)


def _make_snippet(**overrides):
    values = {
        "index": 1,
        "description": "add two numbers",
        "language": "rust",
        "tags": "math demo",
        "date": JAN,
        "updated": JAN,
        "code": "fn add(a,b){a+b}",
    }
    values.update(overrides)
    return Snippet.new(**values)


def test_new_splits_tags_and_derives_extension():
    snippet = _make_snippet(tags="  math\tdemo\n  ")

    assert snippet.tags == ("math", "demo")
    assert snippet.extension == ".rs"


def test_new_accepts_empty_code_and_tags():
    snippet = _make_snippet(code="", tags="")

    assert snippet.code == ""
    assert snippet.tags == ()


def test_language_is_normalized():
    snippet = _make_snippet(language="  Python ")

    assert snippet.language == "python"
    assert snippet.extension == ".py"


def test_supplied_extension_is_ignored_when_table_given():
    snippet = Snippet.model_validate(
        {"description": "d", "language": "rust", "extension": ".bogus"},
        context={"languages": {"rust": Language(".rs", "#DEA584")}},
    )

    assert snippet.extension == ".rs"


def test_unknown_language_falls_back_and_reports_miss():
    misses = []

    snippet = _make_snippet(language="brainfudge", on_miss=misses.append)

    assert snippet.extension == DEFAULT_EXTENSION
    assert len(misses) == 1
    assert isinstance(misses[0], LanguageLookupMiss)
    assert misses[0].language == "brainfudge"


def test_derive_extension_is_total():
    table = {"go": Language(".go", "#00ADD8")}

    assert derive_extension("go", table) == ".go"
    assert derive_extension("", table) == DEFAULT_EXTENSION
    assert derive_extension("cobol", {}) == DEFAULT_EXTENSION


def test_naive_datetimes_are_treated_as_utc():
    snippet = _make_snippet(date=datetime(2023, 1, 1), updated=datetime(2023, 1, 2))

    assert snippet.date == JAN
    assert snippet.date.tzinfo is not None


def test_updated_before_date_is_rejected():
    with pytest.raises(ValidationError):
        _make_snippet(date=JUN, updated=JAN)


def test_create_with_past_date_keeps_updated_current():
    snippet = Snippet.create(3, "d", "python", "a b", "print()", date=JAN)

    assert snippet.index == 3
    assert snippet.date == JAN
    assert snippet.updated > JAN


def test_create_with_future_date_keeps_invariant():
    future = datetime.now(timezone.utc) + timedelta(days=30)

    snippet = Snippet.create(3, "d", "python", date=future)

    assert snippet.date <= snippet.updated


def test_edited_keeps_index_and_refreshes_updated():
    original = _make_snippet()

    edited = original.edited(description="sum", language="python", tags="x y z")

    assert edited.index == original.index
    assert edited.description == "sum"
    assert edited.extension == ".py"
    assert edited.tags == ("x", "y", "z")
    assert edited.date == original.date
    assert edited.updated > original.updated


def test_edited_rejects_index_and_extension_changes():
    snippet = _make_snippet()

    with pytest.raises(TypeError):
        snippet.edited(index=9)
    with pytest.raises(TypeError):
        snippet.edited(extension=".py")


def test_snippets_are_immutable():
    snippet = _make_snippet()

    with pytest.raises(ValidationError):
        snippet.extension = ".py"


def test_tags_are_immutable():
    snippet = _make_snippet()

    assert isinstance(snippet.tags, tuple)
    with pytest.raises(AttributeError):
        snippet.tags.append("extra")


def test_in_date_range_is_half_open():
    snippet = _make_snippet()

    assert snippet.in_date_range(JAN, JUN)
    assert not snippet.in_date_range(JAN - timedelta(days=1), JAN)
    assert not snippet.in_date_range(JAN, JAN)


def test_has_tag_is_exact_and_case_sensitive():
    snippet = _make_snippet()

    assert snippet.has_tag("math")
    assert not snippet.has_tag("Math")
    assert not snippet.has_tag("mat")


def test_get_header():
    assert _make_snippet().get_header() == "■ #1. add two numbers | rust :math:demo:\n"
