"""Unified diff reporting for formatting dry runs."""

from __future__ import annotations

import difflib


__all__ = ["diff_labels", "unified_diff"]


_NO_NEWLINE = "\\ No newline at end of file\n"


def diff_labels(identity: str) -> tuple[str, str]:
    """Return the ``before``/``after`` labels used for a document."""
    return identity, f"{identity} (formatted)"


def _split_lines(content: bytes | str) -> list[str]:
    text = content.decode("utf-8", errors="replace") if isinstance(content, bytes) else content
    # Only "\n" ends a line; "\r", form feeds and Unicode separators stay inside it.
    parts = text.split("\n")
    lines = [f"{part}\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def unified_diff(
    before: bytes | str,
    before_label: str,
    after: bytes | str,
    after_label: str,
) -> str:
    """Return a unified diff between two revisions, or ``""`` when they match."""
    lines: list[str] = []
    for line in difflib.unified_diff(
        _split_lines(before),
        _split_lines(after),
        fromfile=before_label,
        tofile=after_label,
    ):
        if line.endswith("\n"):
            lines.append(line)
        else:
            lines.append(f"{line}\n{_NO_NEWLINE}")
    return "".join(lines)
