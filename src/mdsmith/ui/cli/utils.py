"""Helpers shared by the CLI commands."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
import typer

from mdsmith.core.exceptions import MdsmithError
from mdsmith.core.pipeline import STREAM_TARGET, DocumentProcessor, Outcome, ProcessResult

from .presenter import present_summary
from .state import CLIState, debug_enabled, emit_error


ConfigT = TypeVar("ConfigT", bound=BaseModel)


def apply_overrides(base: ConfigT, overrides: Mapping[str, Any]) -> ConfigT:
    """Return *base* updated with the options given on the command line."""
    if not overrides:
        return base
    payload = base.model_dump()
    payload.update(overrides)
    try:
        return type(base).model_validate(payload)
    except ValidationError as exc:
        details = "; ".join(error["msg"] for error in exc.errors())
        raise typer.BadParameter(details) from exc


def run_processor(
    state: CLIState,
    processor: DocumentProcessor,
    paths: Sequence[str] | None,
    *,
    title: str,
    on_result: Callable[[ProcessResult], None] | None = None,
) -> list[ProcessResult]:
    """Run *processor* over *paths* and exit with status 1 on failures.

    Without paths the standard streams are processed.
    """
    results: list[ProcessResult] = []
    try:
        for result in processor.process(paths or [STREAM_TARGET]):
            results.append(result)
            if on_result is not None:
                on_result(result)
    except MdsmithError as exc:
        if debug_enabled():
            raise
        emit_error(str(exc), exception=exc)
        present_summary(state, title, results)
        raise typer.Exit(code=1) from exc

    present_summary(state, title, results)
    if any(result.outcome is Outcome.FAILED for result in results):
        raise typer.Exit(code=1)
    return results


def load_section(state: CLIState, name: str) -> Any:
    """Return a section of the project configuration, exiting on errors."""
    try:
        return getattr(state.project_config, name)
    except MdsmithError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["apply_overrides", "load_section", "run_processor"]
