"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
FORMAT_PANEL = "Formatting"
RENDERING_PANEL = "Rendering"
DIAGNOSTICS_PANEL = "Diagnostics"

PathsArgument = Annotated[
    list[str] | None,
    typer.Argument(
        metavar="[PATH]...",
        help=(
            "Markdown documents or directories to process. Directories are walked "
            "recursively. Use '-' (the default) to read stdin and write stdout."
        ),
        show_default=False,
    ),
]

KeepGoingOption = Annotated[
    bool | None,
    typer.Option(
        "--keep-going/--fail-fast",
        help="Continue with the remaining documents after a failure.",
        show_default=False,
        rich_help_panel=INPUTS_PANEL,
    ),
]

StyleOption = Annotated[
    str | None,
    typer.Option(
        "--style",
        metavar="STYLE",
        help="Formatting style: none (disable), default (enable), or wrap.",
        show_default=False,
        rich_help_panel=FORMAT_PANEL,
    ),
]

NoLineWrapOption = Annotated[
    bool,
    typer.Option(
        "--no-line-wrap",
        help="Join soft line breaks in paragraphs (same as --style default).",
        rich_help_panel=FORMAT_PANEL,
    ),
]

DiffOption = Annotated[
    bool,
    typer.Option(
        "--diff",
        "-d",
        help="Print a unified diff for each document instead of rewriting it.",
        rich_help_panel=FORMAT_PANEL,
    ),
]

CheckFormattedOption = Annotated[
    bool,
    typer.Option(
        "--check",
        help="List documents that are not formatted and exit with status 1.",
        rich_help_panel=FORMAT_PANEL,
    ),
]

StalenessOption = Annotated[
    str | None,
    typer.Option(
        "--check",
        metavar="POLICY",
        help="Output freshness check: newer (skip up-to-date outputs) or disable.",
        show_default=False,
        rich_help_panel=RENDERING_PANEL,
    ),
]

OutputSuffixOption = Annotated[
    str | None,
    typer.Option(
        "--suffix",
        help="Extension of the generated HTML files.",
        show_default=False,
        rich_help_panel=RENDERING_PANEL,
    ),
]

CssOption = Annotated[
    Path | None,
    typer.Option(
        "--css",
        help="Stylesheet inlined into every page instead of the bundled one.",
        exists=True,
        dir_okay=False,
        readable=True,
        rich_help_panel=RENDERING_PANEL,
    ),
]

TemplateOption = Annotated[
    Path | None,
    typer.Option(
        "--template",
        "-t",
        help="Jinja2 template used to build the HTML page.",
        exists=True,
        dir_okay=False,
        readable=True,
        rich_help_panel=RENDERING_PANEL,
    ),
]

MarkdownExtensionsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--markdown-extensions",
        "-x",
        help=(
            "Additional Markdown extensions to enable "
            "(comma or space separated values are accepted)."
        ),
        rich_help_panel=RENDERING_PANEL,
    ),
]

DisableMarkdownExtensionsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--disable-markdown-extensions",
        "--disable-extension",
        help=(
            "Markdown extensions to disable. Provide a comma separated list "
            "or repeat the option multiple times."
        ),
        rich_help_panel=RENDERING_PANEL,
    ),
]

VerbosityOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="TOML file providing [format] and [render] settings (or [tool.mdsmith.*]).",
        exists=True,
        dir_okay=False,
        readable=True,
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]


__all__ = [
    "DIAGNOSTICS_PANEL",
    "FORMAT_PANEL",
    "INPUTS_PANEL",
    "RENDERING_PANEL",
    "CheckFormattedOption",
    "ConfigOption",
    "CssOption",
    "DebugOption",
    "DiffOption",
    "DisableMarkdownExtensionsOption",
    "KeepGoingOption",
    "MarkdownExtensionsOption",
    "NoLineWrapOption",
    "OutputSuffixOption",
    "PathsArgument",
    "StalenessOption",
    "StyleOption",
    "TemplateOption",
    "VerbosityOption",
]
