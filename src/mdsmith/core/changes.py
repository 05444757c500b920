"""Change detection: staleness of rendered outputs and no-op rewrites."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .config import StalenessPolicy


__all__ = ["is_unchanged", "needs_reprocessing"]


logger = logging.getLogger(__name__)


def needs_reprocessing(
    source: Path,
    output: Path,
    policy: StalenessPolicy = StalenessPolicy.NEWER,
) -> bool:
    """Return whether *output* must be regenerated from *source*.

    With `StalenessPolicy.NEWER`, a missing output always needs work and an
    existing one only when the source was modified strictly after it. A
    missing source raises `FileNotFoundError`.
    """
    if policy is StalenessPolicy.DISABLE:
        return True

    source_mtime = os.stat(source).st_mtime_ns
    try:
        output_mtime = os.stat(output).st_mtime_ns
    except FileNotFoundError:
        return True

    stale = source_mtime > output_mtime
    if not stale:
        logger.debug("%s is up to date with %s", output, source)
    return stale


def is_unchanged(before: bytes, after: bytes) -> bool:
    """Return ``True`` when reprocessing produced byte-identical output."""
    return before == after
