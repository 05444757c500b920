from __future__ import annotations

import pytest

from mdsmith.core.pipeline import Outcome, ProcessResult
from mdsmith.ui.cli import presenter
from mdsmith.ui.cli.state import CLIState


RESULTS = [
    ProcessResult("a.md", Outcome.REWRITTEN),
    ProcessResult("b.md", Outcome.UNCHANGED),
    ProcessResult("c.md", Outcome.REWRITTEN),
    ProcessResult("d.md", Outcome.FAILED),
]


def test_outcomes_are_counted_in_declaration_order() -> None:
    assert presenter.summarise_outcomes(RESULTS) == {
        Outcome.UNCHANGED: 1,
        Outcome.REWRITTEN: 2,
        Outcome.FAILED: 1,
    }


def test_summary_is_hidden_without_verbosity(capsys: pytest.CaptureFixture[str]) -> None:
    presenter.present_summary(CLIState(), "Formatting", RESULTS)
    assert capsys.readouterr().err == ""


def test_summary_table_is_printed_when_verbose(capsys: pytest.CaptureFixture[str]) -> None:
    presenter.present_summary(CLIState(verbosity=1), "Formatting", RESULTS)

    err = capsys.readouterr().err
    assert "Formatting" in err
    assert "rewritten" in err
    assert "failed" in err


def test_diff_is_written_verbatim(capsys: pytest.CaptureFixture[str]) -> None:
    diff = "--- a.md\n+++ a.md (formatted)\n@@ -1 +1 @@\n-[x]\n+[y]\n"
    presenter.present_diff(ProcessResult("a.md", Outcome.DIFFERS, diff=diff))
    assert capsys.readouterr().out == diff


def test_unformatted_documents_are_listed(capsys: pytest.CaptureFixture[str]) -> None:
    presenter.present_unformatted(ProcessResult("docs/a.md", Outcome.DIFFERS))
    assert capsys.readouterr().out == "docs/a.md\n"
