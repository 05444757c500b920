"""Reprocessing pipeline driving formatting and rendering of documents.

Architecture
: `format_document` and `render_document` process one `Endpoint` each and
  report a `ProcessResult`. They never print: diffs and outcomes are returned
  to the caller, and progress goes through a `DiagnosticEmitter`.
: `DocumentProcessor` expands CLI-style targets (``-`` for the standard
  streams, otherwise files or directory trees) into endpoints and runs them
  sequentially. Failures are wrapped in `DocumentError`; the first one aborts
  the run unless the configuration asks to keep going.

Implementation Rationale
: Endpoints acquire their output lazily, so formatting an already canonical
  document never creates a temporary file, and a document skipped by the
  staleness check is never read.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from ..adapters.html import HtmlRenderer
from ..adapters.markdown import resolve_markdown_extensions
from .changes import is_unchanged
from .config import CommonConfig, FormatConfig, RenderConfig
from .diagnostics import DiagnosticEmitter, NullEmitter
from .diffing import diff_labels, unified_diff
from .documents import Document
from .endpoints import Endpoint, FileEndpoint, StreamEndpoint
from .exceptions import ConfigError, DocumentError, SkipDocument
from .formatting import DocumentFormatter
from .walker import iter_documents


__all__ = [
    "STREAM_TARGET",
    "DocumentProcessor",
    "FormatProcessor",
    "Outcome",
    "ProcessResult",
    "RenderProcessor",
    "build_renderer",
    "format_document",
    "render_document",
]


STREAM_TARGET = "-"


class Outcome(str, Enum):
    """Result of reprocessing a single document."""

    SKIPPED = "skipped"
    UNCHANGED = "unchanged"
    REWRITTEN = "rewritten"
    DIFFERS = "differs"
    FAILED = "failed"


@dataclass(slots=True)
class ProcessResult:
    """Outcome of a document together with its optional diff or error."""

    identity: str
    outcome: Outcome
    output_path: Path | None = None
    diff: str | None = None
    error: BaseException | None = None


def format_document(
    endpoint: Endpoint,
    config: FormatConfig,
    formatter: DocumentFormatter | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> ProcessResult:
    """Rewrite one document into canonical form, or report how it would change."""
    active_formatter = formatter or DocumentFormatter(config.style)
    active_emitter = emitter or NullEmitter()

    with endpoint:
        identity = endpoint.identity
        raw = endpoint.read()
        document = Document.from_bytes(raw, identity=identity)
        formatted = active_formatter.format(document)
        unchanged = is_unchanged(raw, formatted)

        if config.diff or config.check:
            if unchanged:
                return ProcessResult(identity, Outcome.UNCHANGED)
            diff_text = None
            if config.diff:
                before_label, after_label = diff_labels(identity)
                diff_text = unified_diff(raw, before_label, formatted, after_label)
            return ProcessResult(identity, Outcome.DIFFERS, diff=diff_text)

        if unchanged and not endpoint.emits_unchanged:
            return ProcessResult(identity, Outcome.UNCHANGED)

        try:
            handle = endpoint.acquire_output()
        except SkipDocument as signal:
            active_emitter.event("skip", {"source": identity, "reason": str(signal)})
            return ProcessResult(identity, Outcome.SKIPPED)

        if not unchanged:
            active_emitter.event("format", {"source": identity})
        _write(handle, formatted)
        endpoint.commit()
        outcome = Outcome.UNCHANGED if unchanged else Outcome.REWRITTEN
        return ProcessResult(identity, outcome, output_path=endpoint.output_path)


def render_document(
    endpoint: Endpoint,
    config: RenderConfig,
    renderer: HtmlRenderer | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> ProcessResult:
    """Render one document to HTML unless its output is already up to date."""
    active_renderer = renderer or build_renderer(config)
    active_emitter = emitter or NullEmitter()

    with endpoint:
        identity = endpoint.identity
        try:
            handle = endpoint.acquire_output()
        except SkipDocument as signal:
            active_emitter.event("skip", {"source": identity, "reason": str(signal)})
            return ProcessResult(identity, Outcome.SKIPPED, output_path=endpoint.output_path)

        output_path = endpoint.output_path
        active_emitter.event(
            "convert",
            {"source": identity, "target": str(output_path) if output_path else None},
        )
        document = Document.from_bytes(endpoint.read(), identity=identity)
        _write(handle, active_renderer.render(document))
        endpoint.commit()
        return ProcessResult(identity, Outcome.REWRITTEN, output_path=output_path)


def _write(handle: BinaryIO, payload: bytes) -> None:
    handle.write(payload)


def build_renderer(config: RenderConfig) -> HtmlRenderer:
    """Create the HTML renderer described by a render configuration."""
    css: str | None = None
    if config.css is not None:
        try:
            css = config.css.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Unable to read stylesheet '{config.css}': {exc}") from exc

    extensions = resolve_markdown_extensions(
        config.markdown_extensions,
        config.disabled_markdown_extensions,
    )
    return HtmlRenderer(template=config.template, css=css, extensions=extensions)


class DocumentProcessor(ABC):
    """Expand targets into endpoints and process them one at a time."""

    def __init__(
        self,
        config: CommonConfig,
        *,
        emitter: DiagnosticEmitter | None = None,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
    ) -> None:
        self.config = config
        self.emitter = emitter or NullEmitter()
        self._stdin = stdin
        self._stdout = stdout

    @abstractmethod
    def file_endpoint(self, path: Path) -> Endpoint:
        """Return the endpoint processing the document at *path*."""

    @abstractmethod
    def process_endpoint(self, endpoint: Endpoint) -> ProcessResult:
        """Process a single endpoint."""

    def stream_endpoint(self) -> Endpoint:
        return StreamEndpoint(self._stdin, self._stdout)

    def process(self, targets: Iterable[str | Path]) -> Iterator[ProcessResult]:
        """Yield a result per document found in *targets*.

        Raises `DocumentError` on the first failure unless ``keep_going`` is
        set, in which case a `Outcome.FAILED` result is yielded instead.
        """
        for target in targets:
            if str(target) == STREAM_TARGET:
                yield self._run(self.stream_endpoint())
                continue
            yield from self._process_tree(Path(target))

    def _process_tree(self, root: Path) -> Iterator[ProcessResult]:
        walk_errors: list[OSError] = []
        on_error = walk_errors.append if self.config.keep_going else None
        documents = iter_documents(root, self.config.suffixes, on_error=on_error)
        while True:
            try:
                path = next(documents)
            except StopIteration:
                break
            except OSError as exc:
                yield self._failure(str(exc.filename or root), exc)
                break
            yield from self._drain(walk_errors)
            yield self._run(self.file_endpoint(path))
        yield from self._drain(walk_errors)

    def _drain(self, errors: list[OSError]) -> Iterator[ProcessResult]:
        while errors:
            exc = errors.pop(0)
            yield self._failure(str(exc.filename or "<walk>"), exc)

    def _run(self, endpoint: Endpoint) -> ProcessResult:
        try:
            return self.process_endpoint(endpoint)
        except Exception as exc:
            return self._failure(endpoint.identity, exc)

    def _failure(self, identity: str, exc: Exception) -> ProcessResult:
        error = DocumentError(identity, exc)
        if not self.config.keep_going:
            raise error from exc
        error.__cause__ = exc
        self.emitter.error(str(error), error)
        return ProcessResult(identity, Outcome.FAILED, error=error)


class FormatProcessor(DocumentProcessor):
    """Rewrite documents into canonical form in place."""

    config: FormatConfig

    def __init__(
        self,
        config: FormatConfig,
        *,
        formatter: DocumentFormatter | None = None,
        emitter: DiagnosticEmitter | None = None,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
    ) -> None:
        super().__init__(config, emitter=emitter, stdin=stdin, stdout=stdout)
        self.formatter = formatter or DocumentFormatter(config.style)

    def file_endpoint(self, path: Path) -> Endpoint:
        return FileEndpoint(path)

    def process_endpoint(self, endpoint: Endpoint) -> ProcessResult:
        return format_document(endpoint, self.config, self.formatter, emitter=self.emitter)


class RenderProcessor(DocumentProcessor):
    """Render documents to HTML files next to their sources."""

    config: RenderConfig

    def __init__(
        self,
        config: RenderConfig,
        *,
        renderer: HtmlRenderer | None = None,
        emitter: DiagnosticEmitter | None = None,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
    ) -> None:
        super().__init__(config, emitter=emitter, stdin=stdin, stdout=stdout)
        self.renderer = renderer or build_renderer(config)

    def file_endpoint(self, path: Path) -> Endpoint:
        return FileEndpoint.for_rendering(
            path,
            suffix=self.config.output_suffix,
            staleness=self.config.staleness,
        )

    def process_endpoint(self, endpoint: Endpoint) -> ProcessResult:
        return render_document(endpoint, self.config, self.renderer, emitter=self.emitter)
