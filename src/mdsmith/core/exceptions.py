"""Custom exception hierarchy for the document reprocessing pipeline."""

from __future__ import annotations

from pathlib import Path


class MdsmithError(RuntimeError):
    """Base exception for document processing failures."""


class MalformedMetadataError(MdsmithError):
    """Raised when a front matter block is unterminated or cannot be parsed."""


class RenderError(MdsmithError):
    """Raised when the Markdown renderer, formatter, or template rejects a document."""


class ConfigError(MdsmithError):
    """Raised when a configuration file contains invalid settings."""


class DocumentError(MdsmithError):
    """Wrap a per-document failure with the identity of the offending document."""

    def __init__(self, identity: str, cause: BaseException) -> None:
        super().__init__(f"{identity}: {cause}")
        self.identity = identity
        self.cause = cause


class AtomicWriteError(OSError):
    """Raised when an atomic rewrite fails; the target file is left untouched."""

    def __init__(
        self,
        target: Path,
        message: str,
        *,
        cleanup_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.target = target
        self.cleanup_error = cleanup_error
        if cleanup_error is not None:
            self.add_note(f"cleanup also failed: {cleanup_error}")


class SkipDocument(Exception):  # noqa: N818 - control-flow signal, not an error
    """Signal that an endpoint's policy leaves the document untouched."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "AtomicWriteError",
    "ConfigError",
    "DocumentError",
    "MalformedMetadataError",
    "MdsmithError",
    "RenderError",
    "SkipDocument",
    "exception_hint",
    "exception_messages",
]
