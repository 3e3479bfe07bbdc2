"""User-facing fold commands bound to an editing surface.

Each command takes the :class:`~foldkit.folding.lifecycle.FoldManager` and the
host document. Commands that need a selection quietly do nothing without one.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from ..editor.protocols import FoldHost
from .lifecycle import FoldManager
from .registry import FoldRange

__all__ = [
    "COMMANDS",
    "fold_all_occurrences",
    "fold_region",
    "run_command",
    "toggle_fold",
    "unfold_all",
    "unfold_at_point",
]

LOGGER = logging.getLogger(__name__)


def fold_region(manager: FoldManager, host: FoldHost) -> FoldRange | None:
    """Fold the active selection."""

    if not host.has_active_selection():
        LOGGER.debug("fold-region ignored: no active selection")
        return None
    start, end = sorted(host.selection_span())
    return manager.registry_for(host).create_fold(start, end)


def fold_all_occurrences(manager: FoldManager, host: FoldHost) -> list[FoldRange]:
    """Fold every occurrence of the selected text across the document."""

    if not host.has_active_selection():
        LOGGER.debug("fold-all-occurrences ignored: no active selection")
        return []
    start, end = sorted(host.selection_span())
    literal = host.read_region(start, end)
    return manager.registry_for(host).fold_occurrences(literal)


def unfold_all(manager: FoldManager, host: FoldHost) -> int:
    if not manager.has_registry(host):
        return 0
    return manager.registry_for(host).unfold_all()


def unfold_at_point(manager: FoldManager, host: FoldHost) -> list[FoldRange]:
    if not manager.has_registry(host):
        return []
    return manager.registry_for(host).unfold_at(host.cursor_position())


def toggle_fold(manager: FoldManager, host: FoldHost) -> list[FoldRange]:
    """Unfold at the caret when a fold covers it, otherwise fold the selection."""

    removed = unfold_at_point(manager, host)
    if removed:
        return removed
    created = fold_region(manager, host)
    return [created] if created is not None else []


COMMANDS: Mapping[str, Callable[[FoldManager, FoldHost], Any]] = {
    "fold-region": fold_region,
    "fold-all-occurrences": fold_all_occurrences,
    "unfold-all": unfold_all,
    "unfold-at-point": unfold_at_point,
    "toggle-fold": toggle_fold,
}


def run_command(name: str, manager: FoldManager, host: FoldHost) -> Any:
    """Dispatch a command by its user-facing name."""

    try:
        command = COMMANDS[name]
    except KeyError as exc:
        raise KeyError(f"Unknown fold command: {name}") from exc
    return command(manager, host)
