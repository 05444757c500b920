"""Rich-aware presenters for CLI output and diagnostics."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

import typer

from mdsmith.core.pipeline import Outcome, ProcessResult

from .state import CLIState


_OUTCOME_STYLES = {
    Outcome.REWRITTEN: "green",
    Outcome.UNCHANGED: "dim",
    Outcome.SKIPPED: "cyan",
    Outcome.DIFFERS: "yellow",
    Outcome.FAILED: "bold red",
}


def present_diff(result: ProcessResult) -> None:
    """Write the unified diff of a result to stdout, verbatim."""
    if result.diff:
        typer.echo(result.diff, nl=False)


def present_unformatted(result: ProcessResult) -> None:
    """List a document that would be rewritten by ``fmt``."""
    typer.echo(result.identity)


def summarise_outcomes(results: Sequence[ProcessResult]) -> dict[Outcome, int]:
    """Count results per outcome, in declaration order of `Outcome`."""
    counts = Counter(result.outcome for result in results)
    return {outcome: counts[outcome] for outcome in Outcome if counts[outcome]}


def present_summary(state: CLIState, title: str, results: Sequence[ProcessResult]) -> None:
    """Render a table of outcome counts on stderr once verbose output is enabled."""
    if state.verbosity < 1 or not results:
        return

    from rich import box
    from rich.table import Table
    from rich.text import Text

    table = Table(title=title or None, box=box.SQUARE, show_edge=True, header_style="bold cyan")
    table.add_column("Outcome")
    table.add_column("Documents", justify="right")
    for outcome, count in summarise_outcomes(results).items():
        style = _OUTCOME_STYLES.get(outcome, "")
        table.add_row(Text(outcome.value, style=style), str(count))
    state.err_console.print(table)


__all__ = [
    "present_diff",
    "present_summary",
    "present_unformatted",
    "summarise_outcomes",
]
