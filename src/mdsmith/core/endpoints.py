"""Input/output endpoints decoupling the pipeline from files and streams.

An endpoint pairs an input source with a lazily acquired output target:

- `read` returns the complete input.
- `acquire_output` is only called once output is known to be needed. It may
  raise `SkipDocument` when the endpoint's policy leaves the document alone.
- `commit` finalises the output.
- `release` runs exactly once, on success and failure alike, and removes any
  uncommitted temporary artefact.

Endpoints are context managers so the pipeline can rely on ``with`` for the
release guarantee.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
import sys
from types import TracebackType
from typing import BinaryIO

from .atomic import AtomicFile
from .changes import needs_reprocessing
from .config import StalenessPolicy
from .documents import STDIN_IDENTITY
from .exceptions import AtomicWriteError, SkipDocument


__all__ = ["Endpoint", "FileEndpoint", "StreamEndpoint"]


class Endpoint(ABC):
    """Uniform contract for every reprocessing target."""

    identity: str
    emits_unchanged: bool = False

    _released: bool = False

    @property
    def output_path(self) -> Path | None:
        """Filesystem path receiving the output, when there is one."""
        return None

    @abstractmethod
    def read(self) -> bytes:
        """Return the complete input document."""

    @abstractmethod
    def acquire_output(self) -> BinaryIO:
        """Return a writable handle, or raise `SkipDocument`."""

    @abstractmethod
    def commit(self) -> None:
        """Finalise the output written to the acquired handle."""

    def _release(self) -> OSError | None:
        return None

    def release(self) -> OSError | None:
        """Release resources once, returning any cleanup error."""
        if self._released:
            return None
        self._released = True
        return self._release()

    def __enter__(self) -> Endpoint:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        cleanup_error = self.release()
        if cleanup_error is None:
            return
        if exc is not None:
            exc.add_note(f"cleanup also failed: {cleanup_error}")
            return
        target = self.output_path or Path(self.identity)
        raise AtomicWriteError(
            target,
            f"Failed to clean up after '{self.identity}': {cleanup_error}",
        ) from cleanup_error


class StreamEndpoint(Endpoint):
    """Pass-through endpoint reading stdin and writing stdout."""

    emits_unchanged = True

    def __init__(
        self,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
        *,
        identity: str = STDIN_IDENTITY,
    ) -> None:
        self.identity = identity
        self._stdin = stdin
        self._stdout = stdout
        self._output: BinaryIO | None = None

    def read(self) -> bytes:
        stream = self._stdin if self._stdin is not None else sys.stdin.buffer
        return stream.read()

    def acquire_output(self) -> BinaryIO:
        if self._output is None:
            self._output = self._stdout if self._stdout is not None else sys.stdout.buffer
        return self._output

    def commit(self) -> None:
        if self._output is not None:
            self._output.flush()


class FileEndpoint(Endpoint):
    """Endpoint reading a file and atomically writing its target.

    The target defaults to the source itself, which rewrites the document in
    place. With `StalenessPolicy.NEWER`, `acquire_output` skips documents
    whose target is already at least as recent as the source.
    """

    def __init__(
        self,
        source: Path,
        target: Path | None = None,
        *,
        staleness: StalenessPolicy = StalenessPolicy.DISABLE,
    ) -> None:
        self.source = Path(source)
        self.target = Path(target) if target is not None else self.source
        self.staleness = staleness
        self.identity = str(self.source)
        self._atomic: AtomicFile | None = None

    @classmethod
    def for_rendering(
        cls,
        source: Path,
        *,
        suffix: str = ".html",
        staleness: StalenessPolicy = StalenessPolicy.NEWER,
    ) -> FileEndpoint:
        """Build an endpoint writing next to *source* with *suffix* substituted."""
        source = Path(source)
        return cls(source, source.with_suffix(suffix), staleness=staleness)

    @property
    def output_path(self) -> Path:
        return self.target

    def read(self) -> bytes:
        return self.source.read_bytes()

    def acquire_output(self) -> BinaryIO:
        if self._atomic is not None:
            return self._atomic.open()
        if not needs_reprocessing(self.source, self.target, self.staleness):
            raise SkipDocument(f"{self.target} is up to date")
        self._atomic = AtomicFile(self.target)
        return self._atomic.open()

    def commit(self) -> None:
        if self._atomic is None:
            raise RuntimeError(f"Output for '{self.identity}' was never acquired.")
        self._atomic.commit()

    def _release(self) -> OSError | None:
        if self._atomic is None or self._atomic.committed:
            return None
        return self._atomic.discard()
