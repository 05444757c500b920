"""Markdown utilities: front matter splitting, HTML rendering, and canonical formatting."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
import re
from threading import Lock
from typing import Any

import markdown
import mdformat
from pymdownx.superfences import fence_code_format
import yaml

from mdsmith.core.exceptions import MalformedMetadataError, RenderError


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "MarkdownConversionError",
    "RenderedMarkdown",
    "canonicalize_markdown",
    "deduplicate_markdown_extensions",
    "normalize_markdown_extensions",
    "render_markdown",
    "resolve_markdown_extensions",
    "split_front_matter",
]


DEFAULT_MARKDOWN_EXTENSIONS = [
    "pymdownx.highlight",
    "pymdownx.superfences",
    "abbr",
    "attr_list",
    "def_list",
    "footnotes",
    "md_in_html",
    "tables",
    "toc",
    "pymdownx.tasklist",
    "pymdownx.tilde",
]


DEFAULT_EXTENSION_CONFIGS: dict[str, dict[str, object]] = {
    "pymdownx.highlight": {
        "anchor_linenums": True,
        "pygments_lang_class": True,
    },
    "pymdownx.superfences": {
        "custom_fences": [
            {
                "name": "mermaid",
                "class": "mermaid",
                "format": fence_code_format,
            }
        ]
    },
    "toc": {
        "permalink": "#",
    },
}

# mdformat plugin providing GitHub Flavored Markdown (tables, task lists, autolinks).
_MDFORMAT_EXTENSIONS = frozenset({"gfm"})

_CLOSING_MARKERS = {"---", "..."}


class MarkdownConversionError(RenderError):
    """Raised when Markdown cannot be converted into HTML."""


@dataclass(slots=True)
class RenderedMarkdown:
    """Result of converting a Markdown body into HTML."""

    html: str


class _MarkdownCacheEntry:
    __slots__ = ("lock", "processor")

    def __init__(self, processor: Any) -> None:
        self.processor = processor
        self.lock = Lock()


_MARKDOWN_CACHE: dict[tuple[str, ...], _MarkdownCacheEntry] = {}
_MARKDOWN_CACHE_GUARD = Lock()


def resolve_markdown_extensions(
    requested: Iterable[str] | None,
    disabled: Iterable[str] | None,
) -> list[str]:
    """Return the active Markdown extension list after applying overrides."""
    enabled = normalize_markdown_extensions(requested)
    disabled_normalized = {
        extension.lower() for extension in normalize_markdown_extensions(disabled)
    }

    combined = deduplicate_markdown_extensions(list(DEFAULT_MARKDOWN_EXTENSIONS) + enabled)

    if not disabled_normalized:
        return combined

    return [extension for extension in combined if extension.lower() not in disabled_normalized]


def deduplicate_markdown_extensions(values: Iterable[str]) -> list[str]:
    """Remove duplicate extensions while preserving order and case."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result


def normalize_markdown_extensions(
    values: Iterable[str] | str | None,
) -> list[str]:
    """Normalise extension names from CLI-friendly strings into a flat list."""
    if values is None:
        return []

    if isinstance(values, str):
        candidates: Iterable[str] = [values]
    else:
        candidates = values

    normalized: list[str] = []
    for value in candidates:
        if not isinstance(value, str):
            continue
        chunks = re.split(r"[,\s\x00]+", value)
        normalized.extend(chunk for chunk in chunks if chunk)
    return normalized


def split_front_matter(source: str) -> tuple[dict[str, Any] | None, str]:
    """Split YAML front matter from Markdown content.

    Returns ``(None, source)`` when the document does not open with a marker
    line. Otherwise returns the parsed mapping and the body, which is the exact
    remainder of *source* after the closing marker line.

    Raises `MalformedMetadataError` when the block is never closed, is not
    valid YAML, or does not hold a mapping.
    """
    offset = 1 if source.startswith("\ufeff") else 0
    first_end = source.find("\n", offset)
    first_line = source[offset:] if first_end == -1 else source[offset:first_end]
    if first_line.rstrip() != "---":
        return None, source

    if first_end == -1:
        raise MalformedMetadataError("Front matter block is not terminated by a closing '---'.")

    block_start = first_end + 1
    position = block_start
    while position < len(source):
        newline = source.find("\n", position)
        line_end = len(source) if newline == -1 else newline + 1
        if source[position:line_end].rstrip() in _CLOSING_MARKERS:
            metadata = _parse_front_matter_block(source[block_start:position])
            return metadata, source[line_end:]
        position = line_end

    raise MalformedMetadataError("Front matter block is not terminated by a closing '---'.")


def _parse_front_matter_block(block: str) -> dict[str, Any]:
    try:
        metadata = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        raise MalformedMetadataError(f"Invalid YAML in front matter: {exc}") from exc

    if metadata is None:
        return {}
    if not isinstance(metadata, dict):
        raise MalformedMetadataError(
            f"Front matter must be a mapping, not {type(metadata).__name__}."
        )
    return metadata


def render_markdown(
    body: str,
    extensions: Sequence[str] | None = None,
) -> RenderedMarkdown:
    """Convert a Markdown body (front matter already removed) into HTML."""
    active_extensions = (
        list(DEFAULT_MARKDOWN_EXTENSIONS) if extensions is None else list(extensions)
    )
    entry = _resolve_markdown_entry(tuple(active_extensions))

    try:
        with entry.lock:
            processor = entry.processor
            processor.reset()
            html = processor.convert(body)
    except Exception as exc:  # pragma: no cover - library-controlled
        raise MarkdownConversionError(f"Failed to convert Markdown source: {exc}") from exc

    return RenderedMarkdown(html=html)


def canonicalize_markdown(body: str, *, wrap: str | int = "keep") -> str:
    """Rewrite a Markdown body into its canonical form using mdformat.

    *wrap* follows mdformat: ``"keep"`` preserves soft line breaks, ``"no"``
    joins paragraph lines, and an integer wraps at that column.
    """
    options: Mapping[str, Any] = {"wrap": wrap}
    try:
        return mdformat.text(body, options=options, extensions=_MDFORMAT_EXTENSIONS)
    except Exception as exc:  # pragma: no cover - library-controlled
        raise RenderError(f"Failed to format Markdown source: {exc}") from exc


def _resolve_markdown_entry(
    extensions_key: tuple[str, ...],
) -> _MarkdownCacheEntry:
    entry = _MARKDOWN_CACHE.get(extensions_key)
    if entry is not None:
        return entry
    with _MARKDOWN_CACHE_GUARD:
        entry = _MARKDOWN_CACHE.get(extensions_key)
        if entry is None:
            processor = _build_markdown_processor(extensions_key)
            entry = _MarkdownCacheEntry(processor)
            _MARKDOWN_CACHE[extensions_key] = entry
    return entry


def _build_markdown_processor(extensions_key: tuple[str, ...]) -> Any:
    active_extensions = list(extensions_key)
    extension_configs = {
        name: dict(DEFAULT_EXTENSION_CONFIGS[name])
        for name in active_extensions
        if name in DEFAULT_EXTENSION_CONFIGS
    }

    try:
        processor = markdown.Markdown(
            extensions=active_extensions, extension_configs=extension_configs
        )
    except Exception as exc:
        raise MarkdownConversionError(f"Failed to initialize Markdown processor: {exc}") from exc

    return processor
