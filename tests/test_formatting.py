from __future__ import annotations

import pytest

from mdsmith.adapters.markdown import canonicalize_markdown
from mdsmith.core.config import FormatStyle
from mdsmith.core.documents import Document
from mdsmith.core.formatting import DocumentFormatter


UNFORMATTED_BODY = """Test
====

Subtest
-------

This is a
line with
breaks.

option
: list
"""

FORMATTED_BODY = """# Test

## Subtest

This is a
line with
breaks.

option
: list
"""

UNFORMATTED_DOCUMENT = (
    """---
author: Firstname Lastname
title: The Title Goes Here
date: "2022-10-27"
version: 1.0.0
status: proposal
---

"""
    + UNFORMATTED_BODY
)

FORMATTED_DOCUMENT = (
    """---
version: 1.0.0
title: The Title Goes Here
status: proposal
date: "2022-10-27"
author: Firstname Lastname
---

"""
    + FORMATTED_BODY
)


def _format(source: str, style: FormatStyle = FormatStyle.WRAP) -> str:
    document = Document.from_bytes(source.encode("utf-8"), identity="test.md")
    return DocumentFormatter(style).format(document).decode("utf-8")


def test_body_without_front_matter_is_canonicalised() -> None:
    assert _format(UNFORMATTED_BODY) == FORMATTED_BODY


def test_front_matter_and_body_are_canonicalised() -> None:
    assert _format(UNFORMATTED_DOCUMENT) == FORMATTED_DOCUMENT


@pytest.mark.parametrize("source", [UNFORMATTED_BODY, UNFORMATTED_DOCUMENT])
def test_formatting_is_idempotent(source: str) -> None:
    once = _format(source)
    assert _format(once) == once


def test_canonical_document_is_unchanged() -> None:
    raw = FORMATTED_DOCUMENT.encode("utf-8")
    document = Document.from_bytes(raw)
    assert DocumentFormatter().format(document) == raw


@pytest.mark.parametrize("source", ["---\ntitle: x\n---\n", "---\ntitle: x\n---\n\n\n"])
def test_front_matter_only_document_has_no_trailing_blank_line(source: str) -> None:
    formatted = _format(source)

    assert formatted == "---\ntitle: x\n---\n"
    assert _format(formatted) == formatted


def test_empty_front_matter_block_is_dropped() -> None:
    assert _format("---\n---\n\n# Title\n") == "# Title\n"


def test_none_style_returns_input_bytes() -> None:
    raw = UNFORMATTED_DOCUMENT.encode("utf-8")
    document = Document.from_bytes(raw)
    assert DocumentFormatter(FormatStyle.NONE).format(document) is raw


def test_default_style_joins_soft_line_breaks() -> None:
    assert _format("This is a\nline with\nbreaks.\n", FormatStyle.DEFAULT) == (
        "This is a line with breaks.\n"
    )


def test_wrap_style_keeps_soft_line_breaks() -> None:
    assert _format("This is a\nline with\nbreaks.\n") == "This is a\nline with\nbreaks.\n"


def test_canonicalize_markdown_normalises_list_markers() -> None:
    assert canonicalize_markdown("* one\n* two\n\n__bold__\n") == "- one\n- two\n\n__bold__\n"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("none", FormatStyle.NONE),
        ("disable", FormatStyle.NONE),
        ("", FormatStyle.NONE),
        ("default", FormatStyle.DEFAULT),
        ("enable", FormatStyle.DEFAULT),
        ("WRAP", FormatStyle.WRAP),
    ],
)
def test_style_names_and_aliases(name: str, expected: FormatStyle) -> None:
    assert FormatStyle.from_string(name) is expected


def test_unknown_style_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported style"):
        FormatStyle.from_string("fancy")
