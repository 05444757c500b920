"""Atomic file replacement through a temporary sibling file.

Observers of the target path only ever see the old content or the complete
new content:

1. a temporary file is created in the target's directory (renames are only
   atomic within one filesystem),
2. the new bytes are written, flushed, and fsync'ed,
3. the temporary file is renamed over the target with `os.replace`.

Any failure removes the temporary file and leaves the target untouched. When
removing the temporary file fails as well, that secondary error is attached to
the primary one instead of replacing it.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
import stat
import tempfile
from types import TracebackType
from typing import BinaryIO, NoReturn

from .exceptions import AtomicWriteError


__all__ = ["AtomicFile", "atomic_write"]


logger = logging.getLogger(__name__)


def _target_mode(target: Path) -> int:
    try:
        return stat.S_IMODE(os.stat(target).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


class AtomicFile:
    """Stage new content for *target* and swap it in on `commit`.

    Use `open` to obtain a binary handle, then `commit` or `discard`. As a
    context manager, the staged file is committed on a clean exit and
    discarded when the block raises.
    """

    def __init__(self, target: Path) -> None:
        self.target = Path(target)
        self._handle: BinaryIO | None = None
        self._temp_path: Path | None = None
        self.committed = False

    @property
    def temp_path(self) -> Path | None:
        """Path of the staged temporary file, if any."""
        return self._temp_path

    def open(self) -> BinaryIO:
        """Create the temporary file and return a writable binary handle."""
        if self._handle is not None:
            return self._handle
        if self.committed:
            raise RuntimeError(f"Atomic write to '{self.target}' was already committed.")

        directory = self.target.parent
        try:
            fd, name = tempfile.mkstemp(
                dir=directory,
                prefix=f".{self.target.name}.",
                suffix=".tmp",
            )
        except OSError as exc:
            raise AtomicWriteError(
                self.target, f"Unable to create a temporary file for '{self.target}': {exc}"
            ) from exc

        self._temp_path = Path(name)
        try:
            os.chmod(name, _target_mode(self.target))
            self._handle = os.fdopen(fd, "wb")
        except BaseException as exc:
            if self._handle is None:
                os.close(fd)
            self._fail(exc)

        logger.debug("staging %s through %s", self.target, self._temp_path)
        return self._handle

    def commit(self) -> None:
        """Flush the staged content to disk and rename it over the target."""
        handle = self._handle
        temp_path = self._temp_path
        if handle is None or temp_path is None:
            raise RuntimeError(f"No staged content to commit for '{self.target}'.")

        try:
            handle.flush()
            os.fsync(handle.fileno())
            handle.close()
            os.replace(temp_path, self.target)
        except BaseException as exc:
            self._fail(exc)

        self._handle = None
        self._temp_path = None
        self.committed = True
        logger.debug("replaced %s", self.target)

    def discard(self) -> OSError | None:
        """Drop any staged content, returning the cleanup error if one occurred."""
        handle, temp_path = self._handle, self._temp_path
        self._handle = None
        self._temp_path = None
        error: OSError | None = None

        if handle is not None and not handle.closed:
            try:
                handle.close()
            except OSError as exc:
                error = exc

        if temp_path is not None:
            try:
                os.unlink(temp_path)
            except FileNotFoundError:
                pass
            except OSError as exc:
                error = error or exc
            else:
                logger.debug("removed temporary file %s", temp_path)
        return error

    def _fail(self, exc: BaseException) -> NoReturn:
        cleanup_error = self.discard()
        if isinstance(exc, OSError) and not isinstance(exc, AtomicWriteError):
            raise AtomicWriteError(
                self.target,
                f"Failed to write '{self.target}': {exc}",
                cleanup_error=cleanup_error,
            ) from exc
        if cleanup_error is not None:
            exc.add_note(f"cleanup also failed: {cleanup_error}")
        raise exc

    def __enter__(self) -> BinaryIO:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is None:
            self.commit()
            return
        if isinstance(exc, OSError):
            self._fail(exc)
        cleanup_error = self.discard()
        if cleanup_error is not None:
            exc.add_note(f"cleanup also failed: {cleanup_error}")


def atomic_write(target: Path, data: bytes) -> None:
    """Atomically replace *target* with *data*."""
    with AtomicFile(target) as handle:
        handle.write(data)
