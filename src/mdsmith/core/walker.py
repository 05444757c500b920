"""Discovery of Markdown documents in a directory tree."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
import logging
import os
from pathlib import Path

from .config import DEFAULT_SUFFIXES


__all__ = ["is_excluded_name", "iter_documents"]


logger = logging.getLogger(__name__)

_EXCLUDED_PREFIXES = (".", "_")


def is_excluded_name(name: str) -> bool:
    """Return ``True`` for hidden (``.``) and private (``_``) entries."""
    return name.startswith(_EXCLUDED_PREFIXES)


def iter_documents(
    root: Path,
    suffixes: Iterable[str] = DEFAULT_SUFFIXES,
    *,
    on_error: Callable[[OSError], None] | None = None,
) -> Iterator[Path]:
    """Yield candidate documents under *root*, depth first and in lexical order.

    Hidden and underscore-prefixed entries are skipped (directories are not
    descended into), as are symlinks and special files. A regular file is
    yielded when its suffix is one of *suffixes*; a *root* naming a file goes
    through the same rules.

    Scanning errors abort the walk unless *on_error* is given, in which case it
    receives the error and the walk continues with the next entry.
    """
    accepted = tuple(suffixes)
    root = Path(root)

    if root.is_dir() and not root.is_symlink():
        yield from _walk(root, accepted, on_error)
        return
    if not root.exists() and not root.is_symlink():
        raise FileNotFoundError(f"No such file or directory: '{root}'")
    if root.is_file() and not root.is_symlink() and _accepts(root.name, accepted):
        yield root


def _accepts(name: str, suffixes: tuple[str, ...]) -> bool:
    if is_excluded_name(name):
        return False
    return os.path.splitext(name)[1] in suffixes


def _walk(
    directory: Path,
    suffixes: tuple[str, ...],
    on_error: Callable[[OSError], None] | None,
) -> Iterator[Path]:
    try:
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        if on_error is None:
            raise
        on_error(exc)
        return

    for entry in entries:
        if is_excluded_name(entry.name):
            continue
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = entry.is_file(follow_symlinks=False)
        except OSError as exc:
            if on_error is None:
                raise
            on_error(exc)
            continue

        path = directory / entry.name
        if is_dir:
            yield from _walk(path, suffixes, on_error)
        elif is_file and _accepts(entry.name, suffixes):
            yield path
        else:
            logger.debug("skipping %s", path)
