"""Open documents as tabs and drive the fold load/unload hooks."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from ..folding.lifecycle import FoldManager
from ..folding.registry import FoldRegistry
from ..utils.file_io import read_text
from .buffer import EditorBuffer
from .document_model import DocumentMetadata, DocumentState

__all__ = ["DocumentTab", "DocumentWorkspace"]

LOGGER = logging.getLogger(__name__)

ActiveTabCallback = Callable[[Optional["DocumentTab"]], None]


def _resolve(path: Path | str | None) -> Path | None:
    return None if path is None else Path(path).expanduser().resolve()


@dataclass(slots=True)
class DocumentTab:
    """A buffer opened in the workspace."""

    id: str
    buffer: EditorBuffer
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    title: str = "Untitled"

    def document(self) -> DocumentState:
        return self.buffer.to_document()

    @property
    def path(self) -> Path | None:
        return self.buffer.document_path

    def update_title(self, fallback: str = "Untitled") -> None:
        path = self.path
        name = path.name if path is not None else fallback
        self.title = f"*{name}" if self.document().dirty else name


class DocumentWorkspace:
    """Tab set whose open/close calls restore and save folds.

    Opening a path asks the :class:`FoldManager` to restore the folds saved for
    it; closing a tab hands the tab's folds back to the manager.
    """

    def __init__(
        self,
        manager: FoldManager | None = None,
        *,
        buffer_factory: Callable[[], EditorBuffer] = EditorBuffer,
    ) -> None:
        self._manager = manager or FoldManager()
        self._buffer_factory = buffer_factory
        self._tabs: Dict[str, DocumentTab] = {}
        self._active_id: str | None = None
        self._active_callbacks: List[ActiveTabCallback] = []

    @property
    def manager(self) -> FoldManager:
        return self._manager

    def open_document(
        self,
        path: Path | str | None = None,
        *,
        text: str | None = None,
        title: str | None = None,
        make_active: bool = True,
    ) -> DocumentTab:
        """Open ``path`` (read from disk unless ``text`` is given) in a new tab."""

        resolved = _resolve(path)
        if text is None:
            text = "" if resolved is None else read_text(resolved)
        buffer = self._buffer_factory()
        buffer.load_document(DocumentState(text=text, metadata=DocumentMetadata(path=resolved)))

        tab = DocumentTab(id=uuid.uuid4().hex, buffer=buffer)
        tab.update_title(title or "Untitled")
        self._tabs[tab.id] = tab
        restored = self._manager.on_document_load(buffer)
        LOGGER.debug("Opened tab %s for %s, restored %d fold(s)", tab.id, resolved or tab.title, len(restored))

        if make_active or self._active_id is None:
            self.set_active_tab(tab.id)
        return tab

    def close_document(self, tab_id: str) -> DocumentTab:
        """Close ``tab_id``; its folds are offered to the persistence store."""

        ids = list(self._tabs)
        tab = self._lookup(tab_id)
        self._manager.on_document_unload(tab.buffer)
        del self._tabs[tab_id]

        if self._active_id == tab_id:
            position = ids.index(tab_id)
            remaining = ids[:position] + ids[position + 1 :]
            self._active_id = remaining[min(position, len(remaining) - 1)] if remaining else None
            self._emit_active()
        return tab

    def set_active_tab(self, tab_id: str) -> DocumentTab:
        tab = self._lookup(tab_id)
        if self._active_id != tab_id:
            self._active_id = tab_id
            self._emit_active()
        return tab

    def add_active_listener(self, callback: ActiveTabCallback) -> None:
        self._active_callbacks.append(callback)

    @property
    def active_tab_id(self) -> str | None:
        return self._active_id

    @property
    def active_tab(self) -> DocumentTab | None:
        return None if self._active_id is None else self._tabs.get(self._active_id)

    def require_active_tab(self) -> DocumentTab:
        tab = self.active_tab
        if tab is None:
            raise RuntimeError("No document is open")
        return tab

    def __iter__(self) -> Iterator[DocumentTab]:
        return iter(list(self._tabs.values()))

    def tab_count(self) -> int:
        return len(self._tabs)

    def get_tab(self, key: str) -> DocumentTab:
        """Look a tab up by id, falling back to its file path."""

        tab = self._tabs.get(key) or self.find_tab_by_path(key)
        if tab is None:
            raise KeyError(f"Unknown tab_id: {key}")
        return tab

    def find_tab_by_path(self, path: Path | str) -> DocumentTab | None:
        target = _resolve(path)
        return next((tab for tab in self._tabs.values() if tab.path == target), None)

    def registry(self, tab_id: str) -> FoldRegistry:
        return self._manager.registry_for(self.get_tab(tab_id).buffer)

    def _lookup(self, tab_id: str) -> DocumentTab:
        try:
            return self._tabs[tab_id]
        except KeyError:
            raise KeyError(f"Unknown tab_id: {tab_id}") from None

    def _emit_active(self) -> None:
        tab = self.active_tab
        for callback in list(self._active_callbacks):
            callback(tab)
