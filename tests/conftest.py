"""Shared pytest fixtures."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from foldkit.editor.buffer import EditorBuffer
from foldkit.editor.document_model import DocumentMetadata, DocumentState
from foldkit.folding.lifecycle import FoldManager
from foldkit.folding.persistence import FoldPersistenceStore
from foldkit.folding.registry import FoldRegistry


def _build_buffer(text: str, path: Path | str | None = None) -> EditorBuffer:
    metadata = DocumentMetadata(path=Path(path) if path is not None else None)
    return EditorBuffer(DocumentState(text=text, metadata=metadata))


@pytest.fixture
def make_buffer() -> Callable[..., EditorBuffer]:
    return _build_buffer


@pytest.fixture
def buffer() -> EditorBuffer:
    return _build_buffer("alpha beta gamma beta delta")


@pytest.fixture
def store() -> FoldPersistenceStore:
    return FoldPersistenceStore()


@pytest.fixture
def manager(store: FoldPersistenceStore) -> FoldManager:
    return FoldManager(store)


@pytest.fixture
def registry(manager: FoldManager, buffer: EditorBuffer) -> FoldRegistry:
    return manager.registry_for(buffer)


@pytest.fixture(autouse=True)
def _isolated_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep logs and settings written by the app out of the real home directory."""

    monkeypatch.setenv("FOLDKIT_LOG_DIR", str(tmp_path / "logs"))
    for name in ("FOLDKIT_PERSIST_FOLDS", "FOLDKIT_PLACEHOLDER", "FOLDKIT_DEBUG_LOGGING", "FOLDKIT_DEBUG"):
        monkeypatch.delenv(name, raising=False)
