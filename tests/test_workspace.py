"""Unit tests for the workspace/document lifecycle layer."""

from __future__ import annotations

from pathlib import Path

import pytest

from foldkit.editor.workspace import DocumentWorkspace
from foldkit.folding.lifecycle import FoldManager
from foldkit.folding.persistence import FoldPersistenceStore


def _write(tmp_path: Path, name: str, text: str) -> Path:
    target = tmp_path / name
    target.write_text(text, encoding="utf-8")
    return target


def test_workspace_opens_tabs_and_tracks_active(tmp_path: Path) -> None:
    workspace = DocumentWorkspace()
    first = workspace.open_document(_write(tmp_path, "one.txt", "first"))
    second = workspace.open_document(text="scratch")

    assert workspace.tab_count() == 2
    assert workspace.active_tab_id == second.id
    assert first.title == "one.txt"
    assert second.title == "Untitled"
    assert first.buffer.text == "first"

    workspace.set_active_tab(first.id)
    assert workspace.active_tab_id == first.id

    closed = workspace.close_document(first.id)
    assert closed.id == first.id
    assert workspace.active_tab_id == second.id


def test_reopening_a_file_restores_its_folds(tmp_path: Path) -> None:
    path = _write(tmp_path, "a.txt", "The quick brown fox jumps over the lazy dog")
    workspace = DocumentWorkspace(FoldManager(FoldPersistenceStore()))
    tab = workspace.open_document(path)
    registry = workspace.registry(tab.id)
    registry.create_fold(4, 9)
    registry.create_fold(35, 39)

    workspace.close_document(tab.id)
    reopened = workspace.open_document(path)

    assert workspace.registry(reopened.id).snapshot() == [(4, 9), (35, 39)]
    assert reopened.buffer.visible_text() == "The ... brown fox jumps over the ... dog"
    assert str(path.resolve()) not in workspace.manager.store


def test_reopening_with_persistence_disabled_restores_nothing(tmp_path: Path) -> None:
    path = _write(tmp_path, "a.txt", "some text here")
    workspace = DocumentWorkspace(FoldManager(FoldPersistenceStore(enabled=False)))
    tab = workspace.open_document(path)
    workspace.registry(tab.id).create_fold(0, 4)

    workspace.close_document(tab.id)
    reopened = workspace.open_document(path)

    assert len(workspace.registry(reopened.id)) == 0


def test_get_tab_accepts_paths(tmp_path: Path) -> None:
    path = _write(tmp_path, "notes.md", "# notes")
    workspace = DocumentWorkspace()
    tab = workspace.open_document(path)

    assert workspace.get_tab(str(path)) is tab
    assert workspace.find_tab_by_path(tmp_path / "missing.md") is None
    with pytest.raises(KeyError):
        workspace.get_tab("nope")


def test_close_unknown_tab_raises() -> None:
    workspace = DocumentWorkspace()

    with pytest.raises(KeyError, match="Unknown tab_id"):
        workspace.close_document("missing")


def test_active_listeners_fire_on_open_and_close() -> None:
    workspace = DocumentWorkspace()
    seen: list[str | None] = []
    workspace.add_active_listener(lambda tab: seen.append(tab.id if tab else None))

    tab = workspace.open_document(text="x")
    workspace.close_document(tab.id)

    assert seen == [tab.id, None]
    with pytest.raises(RuntimeError):
        workspace.require_active_tab()
