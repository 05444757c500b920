"""Document model shared by the formatting and rendering pipelines.

A `Document` keeps the bytes it was read from next to the parsed front matter
and Markdown body. The original bytes are never modified: they are compared
with freshly produced output to detect no-op rewrites, and they feed the
"before" side of formatting diffs.

Usage Example
:
    >>> doc = Document.from_bytes(b"---\\ntitle: Notes\\n---\\n\\n# Notes\\n", identity="notes.md")
    >>> doc.metadata["title"].value
    'Notes'
    >>> doc.body
    '\\n# Notes\\n'
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..adapters.markdown import split_front_matter
from .exceptions import MalformedMetadataError
from .metadata import Metadata, coerce_metadata


__all__ = ["STDIN_IDENTITY", "Document"]


STDIN_IDENTITY = "<stdin>"


@dataclass(frozen=True, slots=True)
class Document:
    """A Markdown document split into front matter and body."""

    identity: str
    raw: bytes
    metadata: Metadata = field(default_factory=dict)
    body: str = ""
    has_front_matter: bool = False

    @classmethod
    def from_bytes(cls, raw: bytes, *, identity: str = STDIN_IDENTITY) -> Document:
        """Decode and split a document, raising `MalformedMetadataError` on bad input."""
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedMetadataError(f"Document is not valid UTF-8: {exc}") from exc

        front_matter, body = split_front_matter(text)
        return cls(
            identity=identity,
            raw=raw,
            metadata=coerce_metadata(front_matter),
            body=body,
            has_front_matter=front_matter is not None,
        )

    @property
    def text(self) -> str:
        """Return the decoded source text."""
        return self.raw.decode("utf-8")
