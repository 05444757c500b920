"""Implementation of the `mdsmith convert` command."""

from __future__ import annotations

from typing import Any

import typer

from mdsmith.adapters.markdown import normalize_markdown_extensions
from mdsmith.core.config import RenderConfig, StalenessPolicy
from mdsmith.core.exceptions import MdsmithError
from mdsmith.core.pipeline import RenderProcessor

from .._options import (
    CssOption,
    DisableMarkdownExtensionsOption,
    KeepGoingOption,
    MarkdownExtensionsOption,
    OutputSuffixOption,
    PathsArgument,
    StalenessOption,
    TemplateOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state
from ..utils import apply_overrides, load_section, run_processor


def convert(
    paths: PathsArgument = None,
    css: CssOption = None,
    template: TemplateOption = None,
    staleness: StalenessOption = None,
    suffix: OutputSuffixOption = None,
    markdown_extensions: MarkdownExtensionsOption = None,
    disable_markdown_extensions: DisableMarkdownExtensionsOption = None,
    keep_going: KeepGoingOption = None,
) -> None:
    """Render Markdown documents to standalone HTML pages.

    Each document is written next to its source with the extension replaced.
    Outputs newer than their source are skipped unless ``--check disable``
    is given.
    """
    state = get_cli_state()

    overrides: dict[str, Any] = {}
    if css is not None:
        overrides["css"] = css
    if template is not None:
        overrides["template"] = template
    if staleness is not None:
        try:
            overrides["staleness"] = StalenessPolicy(staleness.strip().lower())
        except ValueError as exc:
            choices = ", ".join(policy.value for policy in StalenessPolicy)
            raise typer.BadParameter(
                f"Unsupported policy '{staleness}' (expected one of: {choices}).",
                param_hint="'--check'",
            ) from exc
    if suffix is not None:
        overrides["output_suffix"] = suffix
    if markdown_extensions:
        overrides["markdown_extensions"] = normalize_markdown_extensions(markdown_extensions)
    if disable_markdown_extensions:
        overrides["disabled_markdown_extensions"] = normalize_markdown_extensions(
            disable_markdown_extensions
        )
    if keep_going is not None:
        overrides["keep_going"] = keep_going

    config: RenderConfig = apply_overrides(load_section(state, "render"), overrides)

    try:
        processor = RenderProcessor(config, emitter=CliEmitter(state))
    except MdsmithError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    run_processor(state, processor, paths, title="Conversion")


__all__ = ["convert"]
