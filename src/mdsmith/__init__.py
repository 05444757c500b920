"""Primary public API for mdsmith."""

from __future__ import annotations

from mdsmith.adapters.html import HtmlRenderer
from mdsmith.adapters.markdown import (
    DEFAULT_MARKDOWN_EXTENSIONS,
    canonicalize_markdown,
    render_markdown,
    split_front_matter,
)
from mdsmith.core.atomic import AtomicFile, atomic_write
from mdsmith.core.changes import is_unchanged, needs_reprocessing
from mdsmith.core.config import (
    CommonConfig,
    FormatConfig,
    FormatStyle,
    ProjectConfig,
    RenderConfig,
    StalenessPolicy,
    load_project_config,
)
from mdsmith.core.diffing import diff_labels, unified_diff
from mdsmith.core.documents import Document
from mdsmith.core.endpoints import Endpoint, FileEndpoint, StreamEndpoint
from mdsmith.core.exceptions import (
    AtomicWriteError,
    ConfigError,
    DocumentError,
    MalformedMetadataError,
    MdsmithError,
    RenderError,
    SkipDocument,
)
from mdsmith.core.formatting import DocumentFormatter
from mdsmith.core.metadata import canonicalize_metadata
from mdsmith.core.pipeline import (
    FormatProcessor,
    Outcome,
    ProcessResult,
    RenderProcessor,
    format_document,
    render_document,
)
from mdsmith.core.walker import iter_documents
from mdsmith.version import get_version


__version__ = get_version()

__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "AtomicFile",
    "AtomicWriteError",
    "CommonConfig",
    "ConfigError",
    "Document",
    "DocumentError",
    "DocumentFormatter",
    "Endpoint",
    "FileEndpoint",
    "FormatConfig",
    "FormatProcessor",
    "FormatStyle",
    "HtmlRenderer",
    "MalformedMetadataError",
    "MdsmithError",
    "Outcome",
    "ProcessResult",
    "ProjectConfig",
    "RenderConfig",
    "RenderError",
    "RenderProcessor",
    "SkipDocument",
    "StalenessPolicy",
    "StreamEndpoint",
    "__version__",
    "atomic_write",
    "canonicalize_markdown",
    "canonicalize_metadata",
    "diff_labels",
    "format_document",
    "get_version",
    "is_unchanged",
    "iter_documents",
    "load_project_config",
    "needs_reprocessing",
    "render_document",
    "render_markdown",
    "split_front_matter",
    "unified_diff",
]
