"""Tests for the foldkit command line entry point."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from foldkit import app


@pytest.fixture
def document(tmp_path: Path) -> Path:
    target = tmp_path / "doc.txt"
    target.write_text("alpha beta gamma beta delta", encoding="utf-8")
    return target


def _run(*argv: str) -> str:
    stream = io.StringIO()
    assert app.main(list(argv), stdout=stream) == 0
    return stream.getvalue()


def test_cli_prints_text_with_folds_collapsed(document: Path, tmp_path: Path) -> None:
    output = _run(str(document), "--fold", "0:5", "--settings-path", str(tmp_path / "s.json"))

    assert output == "... beta gamma beta delta"


def test_cli_folds_occurrences_and_lists_them(document: Path, tmp_path: Path) -> None:
    output = _run(
        str(document),
        "--fold-occurrences",
        "beta",
        "--list",
        "--settings-path",
        str(tmp_path / "s.json"),
    )

    assert json.loads(output) == [{"start": 6, "end": 10}, {"start": 17, "end": 21}]


def test_cli_unfold_at_runs_after_folding(document: Path, tmp_path: Path) -> None:
    output = _run(
        str(document),
        "--fold",
        "0:10",
        "--fold",
        "3:7",
        "--fold",
        "22:27",
        "--unfold-at",
        "5",
        "--settings-path",
        str(tmp_path / "s.json"),
    )

    assert output == "alpha beta gamma beta ..."


def test_cli_placeholder_override(document: Path, tmp_path: Path) -> None:
    output = _run(
        str(document),
        "--fold",
        "6:10",
        "--set",
        "placeholder_glyph=[+]",
        "--settings-path",
        str(tmp_path / "s.json"),
    )

    assert output == "alpha [+] gamma beta delta"


def test_cli_rejects_invalid_fold(document: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        app.main([str(document), "--fold", "9:2", "--settings-path", str(tmp_path / "s.json")])

    assert excinfo.value.code == 2
    assert "Invalid fold" in capsys.readouterr().err


def test_cli_rejects_unknown_override(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        app.main(["--dump-settings", "--set", "theme=dark", "--settings-path", str(tmp_path / "s.json")])

    assert excinfo.value.code == 2
    assert "Unknown setting 'theme'" in capsys.readouterr().err


def test_dump_settings_reports_effective_values(tmp_path: Path) -> None:
    output = _run("--dump-settings", "--set", "persist_folds=off", "--settings-path", str(tmp_path / "s.json"))

    payload = json.loads(output)
    assert payload["settings"]["persist_folds"] is False
    assert payload["meta"]["cli_overrides"] == ["persist_folds"]
    assert payload["meta"]["path"] == str(tmp_path / "s.json")


def test_cli_requires_a_path(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        app.main(["--settings-path", str(tmp_path / "s.json")])

    assert excinfo.value.code == 2
