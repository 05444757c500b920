"""Implementation of the `mdsmith fmt` command."""

from __future__ import annotations

from typing import Any

import typer

from mdsmith.core.config import FormatConfig, FormatStyle
from mdsmith.core.pipeline import FormatProcessor, Outcome, ProcessResult

from .._options import (
    CheckFormattedOption,
    DiffOption,
    KeepGoingOption,
    NoLineWrapOption,
    PathsArgument,
    StyleOption,
)
from ..diagnostics import CliEmitter
from ..presenter import present_diff, present_unformatted
from ..state import get_cli_state
from ..utils import apply_overrides, load_section, run_processor


def fmt(
    paths: PathsArgument = None,
    diff: DiffOption = False,
    check: CheckFormattedOption = False,
    style: StyleOption = None,
    no_line_wrap: NoLineWrapOption = False,
    keep_going: KeepGoingOption = None,
) -> None:
    """Rewrite Markdown documents with sorted front matter and canonical formatting.

    Documents already in canonical form are left untouched. Stdin input is
    always echoed to stdout.
    """
    state = get_cli_state()

    overrides: dict[str, Any] = {}
    if style is not None:
        try:
            overrides["style"] = FormatStyle.from_string(style)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="'--style'") from exc
    if no_line_wrap:
        overrides["style"] = FormatStyle.DEFAULT
    if diff:
        overrides["diff"] = True
    if check:
        overrides["check"] = True
    if keep_going is not None:
        overrides["keep_going"] = keep_going

    config: FormatConfig = apply_overrides(load_section(state, "format"), overrides)

    def report(result: ProcessResult) -> None:
        if result.outcome is not Outcome.DIFFERS:
            return
        if config.diff:
            present_diff(result)
        else:
            present_unformatted(result)

    processor = FormatProcessor(config, emitter=CliEmitter(state))
    results = run_processor(state, processor, paths, title="Formatting", on_result=report)

    if config.check and any(result.outcome is Outcome.DIFFERS for result in results):
        raise typer.Exit(code=1)


__all__ = ["fmt"]
