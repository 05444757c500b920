"""Canonical rewriting of whole documents (front matter plus Markdown body)."""

from __future__ import annotations

from ..adapters.markdown import canonicalize_markdown
from .config import FormatStyle
from .documents import Document
from .metadata import canonicalize_metadata


__all__ = ["DocumentFormatter"]


class DocumentFormatter:
    """Produce the canonical bytes of a document.

    The canonical form is the serialised front matter (omitted entirely when
    empty) followed by the mdformat rendition of the body. Formatting a
    canonical document yields the same bytes again.
    """

    def __init__(self, style: FormatStyle = FormatStyle.WRAP) -> None:
        self.style = style

    def format(self, document: Document) -> bytes:
        if self.style is FormatStyle.NONE:
            return document.raw
        body = canonicalize_markdown(document.body, wrap=self.style.wrap)
        header = canonicalize_metadata(document.metadata)
        if header and not body:
            # Drop the blank separator line when there is no body to separate.
            header = header[:-1]
        return (header + body).encode("utf-8")
