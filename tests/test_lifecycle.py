"""Tests for the unload/load fold lifecycle."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

from foldkit.folding.lifecycle import FoldManager
from foldkit.folding.persistence import FoldPersistenceStore

_TEXT = "0123456789" * 3


def test_unload_then_load_restores_folds(tmp_path: Path, make_buffer, manager: FoldManager) -> None:
    path = tmp_path / "a.txt"
    first = make_buffer(_TEXT, path)
    registry = manager.registry_for(first)
    registry.create_fold(5, 10)
    registry.create_fold(20, 25)

    saved = manager.on_document_unload(first)

    assert saved == [(5, 10), (20, 25)]
    assert not manager.has_registry(first)
    identity = str(path.resolve())
    assert identity in manager.store

    second = make_buffer(_TEXT, path)
    restored = manager.on_document_load(second)

    assert [fold.as_tuple() for fold in restored] == [(5, 10), (20, 25)]
    assert all(fold.live for fold in restored)
    assert manager.registry_for(second).snapshot() == [(5, 10), (20, 25)]
    assert identity not in manager.store
    assert second.visible_text() == "01234...0123456789...56789"


def test_restore_is_one_shot(tmp_path: Path, make_buffer, manager: FoldManager) -> None:
    path = tmp_path / "a.txt"
    first = make_buffer(_TEXT, path)
    manager.registry_for(first).create_fold(0, 3)
    manager.on_document_unload(first)

    assert len(manager.on_document_load(make_buffer(_TEXT, path))) == 1
    assert manager.on_document_load(make_buffer(_TEXT, path)) == []


def test_disabled_persistence_restores_nothing(tmp_path: Path, make_buffer, manager: FoldManager) -> None:
    path = tmp_path / "a.txt"
    first = make_buffer(_TEXT, path)
    manager.registry_for(first).create_fold(5, 10)
    manager.store.enabled = False

    assert manager.on_document_unload(first) == []

    manager.store.enabled = True
    assert manager.on_document_load(make_buffer(_TEXT, path)) == []


def test_documents_without_identity_are_not_persisted(make_buffer, manager: FoldManager) -> None:
    untitled = make_buffer(_TEXT)
    manager.registry_for(untitled).create_fold(0, 4)

    assert manager.on_document_unload(untitled) == []
    assert len(manager.store) == 0
    assert manager.on_document_load(make_buffer(_TEXT)) == []


def test_unload_detaches_edit_subscription(tmp_path: Path, make_buffer, manager: FoldManager) -> None:
    buffer = make_buffer(_TEXT, tmp_path / "a.txt")
    fold = manager.registry_for(buffer).create_fold(5, 10)
    manager.on_document_unload(buffer)

    buffer.insert_text("X", position=7)

    assert not fold.live
    assert manager.store.peek(str((tmp_path / "a.txt").resolve())) == [(5, 10)]


def test_load_skips_pairs_outside_reloaded_text(tmp_path: Path, make_buffer, manager: FoldManager, caplog) -> None:
    path = tmp_path / "a.txt"
    manager.store.save(str(path.resolve()), [(0, 2), (5, 99)])

    with caplog.at_level("WARNING"):
        restored = manager.on_document_load(make_buffer("short text", path))

    assert [fold.as_tuple() for fold in restored] == [(0, 2)]
    assert "Skipping saved fold 5-99" in caplog.text


def test_registry_for_subscribes_once(make_buffer, manager: FoldManager) -> None:
    buffer = make_buffer(_TEXT)

    assert manager.registry_for(buffer) is manager.registry_for(buffer)
    fold = manager.registry_for(buffer).create_fold(2, 4)
    buffer.insert_text("!", position=0)

    assert fold.as_tuple() == (3, 5)


def test_from_settings_applies_flag_and_placeholder(make_buffer) -> None:
    settings = SimpleNamespace(persist_folds=False, placeholder_glyph="<>")
    store = FoldPersistenceStore()

    manager = FoldManager.from_settings(settings, store)

    assert manager.store is store
    assert store.enabled is False
    buffer = make_buffer("abcdef")
    manager.registry_for(buffer).create_fold(1, 3)
    assert buffer.visible_text() == "a<>def"


def test_explicit_disabled_store_is_kept(tmp_path: Path, make_buffer) -> None:
    store = FoldPersistenceStore(enabled=False)
    manager = FoldManager(store)
    document = make_buffer(_TEXT, tmp_path / "a.txt")
    manager.registry_for(document).create_fold(0, 5)

    assert manager.store is store
    assert manager.on_document_unload(document) == []
    assert len(store) == 0


def test_managers_sharing_an_empty_store_see_each_others_folds(tmp_path: Path, make_buffer) -> None:
    shared = FoldPersistenceStore()
    writer = FoldManager(shared)
    reader = FoldManager.from_settings(SimpleNamespace(persist_folds=True, placeholder_glyph="..."), shared)
    path = tmp_path / "shared.txt"

    first = make_buffer(_TEXT, path)
    writer.registry_for(first).create_fold(5, 10)
    writer.on_document_unload(first)

    assert reader.store is shared
    restored = reader.on_document_load(make_buffer(_TEXT, path))
    assert [fold.as_tuple() for fold in restored] == [(5, 10)]
    assert str(path.resolve()) not in shared
