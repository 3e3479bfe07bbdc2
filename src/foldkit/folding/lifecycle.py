"""Glue between documents, their fold registries and the persistence store."""

from __future__ import annotations

import logging
from typing import Any, Dict

from ..core.ranges import InvalidRangeError
from ..editor.protocols import FoldHost
from .persistence import FoldPersistenceStore
from .registry import DEFAULT_PLACEHOLDER, FoldRange, FoldRegistry

__all__ = ["FoldManager"]

LOGGER = logging.getLogger(__name__)


class FoldManager:
    """Owns one :class:`FoldRegistry` per open document.

    The manager subscribes each registry to its host's edit notifications and
    implements the unload/load protocol against a shared
    :class:`FoldPersistenceStore`.
    """

    def __init__(
        self,
        store: FoldPersistenceStore | None = None,
        *,
        placeholder: str = DEFAULT_PLACEHOLDER,
    ) -> None:
        self._store = store if store is not None else FoldPersistenceStore()
        self._placeholder = placeholder
        self._registries: Dict[int, tuple[FoldHost, FoldRegistry]] = {}

    @classmethod
    def from_settings(cls, settings: Any, store: FoldPersistenceStore | None = None) -> "FoldManager":
        """Build a manager honoring ``persist_folds`` and ``placeholder_glyph``."""

        active_store = store if store is not None else FoldPersistenceStore()
        active_store.enabled = bool(getattr(settings, "persist_folds", True))
        placeholder = getattr(settings, "placeholder_glyph", None) or DEFAULT_PLACEHOLDER
        return cls(active_store, placeholder=placeholder)

    @property
    def store(self) -> FoldPersistenceStore:
        return self._store

    @property
    def placeholder(self) -> str:
        return self._placeholder

    def registry_for(self, host: FoldHost) -> FoldRegistry:
        """Return the registry of ``host``, creating and subscribing it on first use."""

        entry = self._registries.get(id(host))
        if entry is not None:
            return entry[1]
        registry = FoldRegistry(host, placeholder=self._placeholder)
        host.add_edit_listener(registry.on_edit)
        self._registries[id(host)] = (host, registry)
        return registry

    def has_registry(self, host: FoldHost) -> bool:
        return id(host) in self._registries

    # ------------------------------------------------------------------
    # Lifecycle hooks
    # ------------------------------------------------------------------
    def on_document_load(self, host: FoldHost) -> list[FoldRange]:
        """Restore folds saved when the same document was last unloaded."""

        identity = host.stable_identity()
        if identity is None or not self._store.enabled:
            return []
        saved = self._store.take(identity)
        if not saved:
            return []
        registry = self.registry_for(host)
        restored: list[FoldRange] = []
        for start, end in saved:
            try:
                restored.append(registry.create_fold(start, end))
            except InvalidRangeError as exc:
                LOGGER.warning("Skipping saved fold %s-%s for %s: %s", start, end, identity, exc)
        LOGGER.debug("Restored %d fold(s) for %s", len(restored), identity)
        return restored

    def on_document_unload(self, host: FoldHost) -> list[tuple[int, int]]:
        """Save live folds of ``host`` (when possible) and forget its registry."""

        entry = self._registries.pop(id(host), None)
        if entry is None:
            return []
        registry = entry[1]
        host.remove_edit_listener(registry.on_edit)
        spans = registry.snapshot()
        registry.detach()
        identity = host.stable_identity()
        if identity is None or not self._store.enabled or not spans:
            return []
        self._store.save(identity, spans)
        return spans
