from __future__ import annotations

from datetime import date

import pytest

from mdsmith.core.metadata import (
    MappingValue,
    ScalarValue,
    SequenceValue,
    canonicalize_metadata,
    coerce_metadata,
    coerce_value,
    mapping_field,
    sequence_field,
    text_field,
    to_plain,
)


def test_empty_metadata_serialises_to_nothing() -> None:
    assert canonicalize_metadata({}) == ""


def test_top_level_keys_are_sorted_in_descending_order() -> None:
    metadata = coerce_metadata(
        {
            "author": "Firstname Lastname",
            "title": "The Title Goes Here",
            "date": "2022-10-27",
            "version": "1.0.0",
            "status": "proposal",
        }
    )

    assert canonicalize_metadata(metadata) == (
        "---\n"
        "version: 1.0.0\n"
        "title: The Title Goes Here\n"
        "status: proposal\n"
        'date: "2022-10-27"\n'
        "author: Firstname Lastname\n"
        "---\n\n"
    )


def test_descending_order_is_bytewise() -> None:
    metadata = coerce_metadata({"b": "1", "B": "2", "a": "3", "_x": "4"})
    lines = canonicalize_metadata(metadata).splitlines()[1:-2]
    assert [line.split(":")[0] for line in lines] == ["b", "a", "_x", "B"]


def test_nested_mappings_are_sorted_in_ascending_order() -> None:
    metadata = coerce_metadata({"footer": {"zeta": "z", "alpha": "a"}, "title": "T"})

    assert canonicalize_metadata(metadata) == (
        "---\ntitle: T\nfooter:\n  alpha: a\n  zeta: z\n---\n\n"
    )


def test_sequences_keep_their_order_and_are_indented() -> None:
    metadata = coerce_metadata({"styles": ["b.css", "a.css"]})

    assert canonicalize_metadata(metadata) == "---\nstyles:\n  - b.css\n  - a.css\n---\n\n"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("true", '"true"'),
        ("42", '"42"'),
        ("", '""'),
        ("plain words", "plain words"),
    ],
)
def test_strings_are_quoted_only_when_ambiguous(value: str, expected: str) -> None:
    rendered = canonicalize_metadata(coerce_metadata({"key": value}))
    assert rendered == f"---\nkey: {expected}\n---\n\n"


def test_native_scalars_round_trip_without_quotes() -> None:
    metadata = coerce_metadata({"draft": True, "weight": 3, "date": date(2022, 10, 27)})

    assert canonicalize_metadata(metadata) == (
        "---\nweight: 3\ndraft: true\ndate: 2022-10-27\n---\n\n"
    )


def test_unicode_is_emitted_verbatim() -> None:
    rendered = canonicalize_metadata(coerce_metadata({"author": "Zoë Müller"}))
    assert "author: Zoë Müller\n" in rendered


def test_coerce_value_builds_typed_tree() -> None:
    value = coerce_value({"tags": ["a", {"k": 1}], 2: None})

    assert isinstance(value, MappingValue)
    assert value.keys() == ["tags", "2"]
    tags = value.get("tags")
    assert isinstance(tags, SequenceValue)
    assert tags.items[0] == ScalarValue("a")
    assert isinstance(tags.items[1], MappingValue)
    assert value.get("2") == ScalarValue(None)
    assert value.get("missing") is None


def test_to_plain_sorts_nested_mappings() -> None:
    value = coerce_value({"b": 1, "a": [2, 3]})
    assert list(to_plain(value)) == ["a", "b"]
    assert to_plain(value) == {"a": [2, 3], "b": 1}


def test_text_field_joins_sequences() -> None:
    metadata = coerce_metadata({"author": ["Ada", "Grace"], "title": "Notes"})

    assert text_field(metadata, "author") == "Ada, Grace"
    assert text_field(metadata, "title") == "Notes"
    assert text_field(metadata, "missing", "fallback") == "fallback"


def test_text_field_formats_native_scalars() -> None:
    metadata = coerce_metadata({"date": date(2024, 1, 2), "draft": False, "version": 2})

    assert text_field(metadata, "date") == "2024-01-02"
    assert text_field(metadata, "draft") == "false"
    assert text_field(metadata, "version") == "2"


def test_sequence_and_mapping_fields() -> None:
    metadata = coerce_metadata(
        {
            "styles": "single.css",
            "footer": {"z": "last", "a": "first", "nested": {"x": 1}},
        }
    )

    assert sequence_field(metadata, "styles") == ["single.css"]
    assert sequence_field(metadata, "missing") == []
    assert mapping_field(metadata, "footer") == {"a": "first", "z": "last"}
    assert list(mapping_field(metadata, "footer")) == ["a", "z"]
    assert mapping_field(metadata, "styles") == {}
