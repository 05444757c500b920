from __future__ import annotations

from pathlib import Path

import pytest

from mdsmith.adapters.html import DEFAULT_CREATOR, HtmlRenderer, build_page_fields, default_css
from mdsmith.core.documents import Document
from mdsmith.core.exceptions import RenderError


SOURCE = b"""---
title: Release <Notes>
author: [Ada, Grace]
version: 1.2.0
date: 2024-05-01
styles: [print.css, screen.css]
footer:
  license: CC-BY
  contact: docs@example.org
---

# Heading

Some *text*.
"""


def _document(raw: bytes = SOURCE) -> Document:
    return Document.from_bytes(raw, identity="notes.md")


def test_page_fields_are_collected_from_front_matter() -> None:
    fields = build_page_fields(_document(), "<p>x</p>", css="body {}")

    assert fields.title == "Release <Notes>"
    assert fields.author == "Ada, Grace"
    assert fields.version == "1.2.0"
    assert fields.date == "2024-05-01"
    assert fields.creator == DEFAULT_CREATOR
    assert fields.styles == ["print.css", "screen.css"]
    assert fields.footer == {"contact": "docs@example.org", "license": "CC-BY"}


def test_missing_fields_default_to_empty() -> None:
    fields = build_page_fields(_document(b"# Bare\n"), "")

    assert fields.title == ""
    assert fields.author == ""
    assert fields.styles == []
    assert fields.footer == {}


def test_default_template_renders_a_page() -> None:
    html = HtmlRenderer().render(_document()).decode("utf-8")

    assert html.startswith("<!DOCTYPE html>")
    assert "<title>Release &lt;Notes&gt;</title>" in html
    assert '<meta name="author" content="Ada, Grace">' in html
    assert '<link rel="stylesheet" href="print.css">' in html
    assert html.index("print.css") < html.index("screen.css")
    assert "<em>text</em>" in html
    assert "<dt>contact</dt><dd>docs@example.org</dd>" in html
    assert default_css().strip()[:20] in html


def test_custom_css_replaces_the_bundled_stylesheet() -> None:
    html = HtmlRenderer(css="main { color: red; }").render(_document()).decode("utf-8")
    assert "main { color: red; }" in html


def test_custom_template(tmp_path: Path) -> None:
    template = tmp_path / "page.html"
    template.write_text("{{ title }}|{{ creator }}|{{ body }}", encoding="utf-8")

    html = HtmlRenderer(template=template).render(_document()).decode("utf-8")

    assert html.startswith("Release &lt;Notes&gt;|mdsmith|")
    assert "<em>text</em>" in html


def test_creator_can_be_overridden_by_front_matter() -> None:
    document = _document(b"---\ncreator: docs team\n---\n\nBody\n")
    fields = build_page_fields(document, "")
    assert fields.creator == "docs team"


def test_mermaid_fences_are_kept_for_client_rendering() -> None:
    document = _document(b"```mermaid\ngraph TD; A-->B\n```\n")
    html = HtmlRenderer().render(document).decode("utf-8")
    assert 'class="mermaid"' in html


def test_missing_template_raises_render_error(tmp_path: Path) -> None:
    with pytest.raises(RenderError, match="Unable to load template"):
        HtmlRenderer(template=tmp_path / "absent.html")


def test_broken_template_raises_render_error(tmp_path: Path) -> None:
    template = tmp_path / "page.html"
    template.write_text("{{ title | no_such_filter }}", encoding="utf-8")

    with pytest.raises(RenderError):
        HtmlRenderer(template=template)
