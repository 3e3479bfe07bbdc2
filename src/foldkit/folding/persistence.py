"""In-process store carrying fold extents across document unload/load.

Closing a document saves the extents of its live folds under the document's
stable identity; reopening it takes them back out exactly once. Nothing is
written to disk, so stored folds last only as long as the process.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, MutableMapping, Sequence

from ..core.ranges import TextRange

__all__ = ["FoldPersistenceStore"]

LOGGER = logging.getLogger(__name__)


class FoldPersistenceStore:
    """Process-wide, one-shot map from document identity to saved fold bounds.

    Thread-safe: every read and write goes through one lock, so hosts that
    fire lifecycle hooks from several threads stay serialized.

    Example usage:
        >>> store = FoldPersistenceStore()
        >>> store.save("a.txt", [(5, 10), (20, 25)])
        True
        >>> store.take("a.txt")
        [(5, 10), (20, 25)]
        >>> store.take("a.txt") is None
        True
    """

    def __init__(self, *, enabled: bool = True) -> None:
        self._entries: MutableMapping[str, list[tuple[int, int]]] = {}
        self._enabled = bool(enabled)
        self._lock = threading.RLock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        with self._lock:
            self._enabled = bool(value)

    def save(self, identity: str, spans: Iterable[Sequence[int]]) -> bool:
        """Store ``spans`` for ``identity``, replacing any previous entry.

        Args:
            identity: Stable document key, typically a resolved file path.
            spans: ``(start, end)`` pairs in the order they should be restored.

        Returns:
            ``True`` when the entry was stored, ``False`` when persistence is
            disabled.
        """
        pairs = [TextRange.from_value(span).to_tuple() for span in spans]
        with self._lock:
            if not self._enabled:
                return False
            if identity in self._entries:
                LOGGER.debug("Replacing saved folds for %s", identity)
            self._entries[identity] = pairs
        LOGGER.debug("Saved %d fold(s) for %s", len(pairs), identity)
        return True

    def take(self, identity: str) -> list[tuple[int, int]] | None:
        """Remove and return the entry for ``identity``.

        Returns ``None`` when nothing was saved or persistence is disabled.
        """
        with self._lock:
            if not self._enabled:
                return None
            return self._entries.pop(identity, None)

    def peek(self, identity: str) -> list[tuple[int, int]] | None:
        with self._lock:
            entry = self._entries.get(identity)
            return list(entry) if entry is not None else None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
