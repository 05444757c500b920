"""CLI command implementations exposed via `mdsmith.ui.cli`.

Re-exports the Typer command functions defined in the sibling modules so they
can be imported using dotted paths (e.g. ``mdsmith.ui.cli.commands.fmt``).
"""

from __future__ import annotations

from .convert import convert
from .fmt import fmt


__all__ = ["convert", "fmt"]
