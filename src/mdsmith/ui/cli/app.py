"""Typer application wiring for the mdsmith CLI."""

from __future__ import annotations

import typer

from mdsmith.version import get_version

from ._options import ConfigOption, DebugOption, VerbosityOption
from .commands import convert, fmt
from .state import debug_enabled, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Canonicalise Markdown front matter and render documents to HTML.",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    verbose: VerbosityOption = 0,
    debug: DebugOption = False,
    config: ConfigOption = None,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the mdsmith version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
) -> None:
    """Canonicalise Markdown front matter and render documents to HTML."""
    set_cli_state(ctx=ctx, verbosity=verbose, debug=debug, config_path=config)


app.command("fmt")(fmt)
app.command("format", hidden=True)(fmt)
app.command("convert")(convert)


@app.command("version")
def version_command() -> None:
    """Print the mdsmith version."""
    typer.echo(get_version())


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - last-resort reporting
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
