from mdsmith.adapters.markdown import (
    DEFAULT_MARKDOWN_EXTENSIONS,
    deduplicate_markdown_extensions,
    normalize_markdown_extensions,
    render_markdown,
    resolve_markdown_extensions,
)


def test_tables_and_footnotes_are_enabled_by_default() -> None:
    html = render_markdown(
        "| a | b |\n| --- | --- |\n| 1 | 2 |\n\nText[^1].\n\n[^1]: Note.\n",
        extensions=DEFAULT_MARKDOWN_EXTENSIONS,
    ).html

    assert "<table>" in html
    assert 'class="footnote"' in html


def test_code_blocks_are_highlighted() -> None:
    html = render_markdown("```python\nprint('hi')\n```\n").html
    assert 'class="language-python highlight"' in html


def test_normalize_splits_cli_values() -> None:
    assert normalize_markdown_extensions(["abbr,tables", "toc  smarty"]) == [
        "abbr",
        "tables",
        "toc",
        "smarty",
    ]
    assert normalize_markdown_extensions(None) == []


def test_deduplicate_is_case_insensitive() -> None:
    assert deduplicate_markdown_extensions(["toc", "TOC", "abbr"]) == ["toc", "abbr"]


def test_resolve_applies_additions_and_removals() -> None:
    resolved = resolve_markdown_extensions(["smarty"], ["toc"])

    assert "smarty" in resolved
    assert "toc" not in resolved
    assert resolved[0] == DEFAULT_MARKDOWN_EXTENSIONS[0]
