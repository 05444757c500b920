"""Public CLI exports for mdsmith."""

from __future__ import annotations

from mdsmith.adapters.markdown import DEFAULT_MARKDOWN_EXTENSIONS

from .app import app, main
from .state import debug_enabled, emit_error, emit_warning, get_cli_state


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "app",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "main",
]
