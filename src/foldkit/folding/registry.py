"""Per-document registry of folded text ranges.

A :class:`FoldRegistry` owns every :class:`FoldRange` of one document. It asks
the host to hide a span when a fold is created, reveals it again when the fold
is destroyed, and listens to the host's pre-edit notifications so that a fold
never outlives a change to the text it hides.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from ..core.ranges import TextRange
from ..editor.protocols import CANCEL_ACTION, CONFIRM_ACTION, FoldHost
from .occurrences import find_all_occurrences

__all__ = ["DEFAULT_PLACEHOLDER", "FoldRange", "FoldRegistry"]

LOGGER = logging.getLogger(__name__)
DEFAULT_PLACEHOLDER = "..."


@dataclass(slots=True, eq=False)
class FoldRange:
    """One folded span ``start``..``end`` plus its live/dead state.

    ``artifact`` is whatever the host returned from ``hide_span``; it is kept so
    the span can be revealed later and plays no part in the fold's identity.
    """

    start: int
    end: int
    live: bool = True
    artifact: Any = field(default=None, repr=False)

    def covers(self, position: int) -> bool:
        return self.start <= position <= self.end

    def intersects(self, start: int, end: int) -> bool:
        return self.start <= end and start <= self.end

    def span(self) -> TextRange:
        return TextRange(self.start, self.end)

    def as_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)


class FoldRegistry:
    """Tracks the live folds of a single document."""

    def __init__(self, host: FoldHost, *, placeholder: str = DEFAULT_PLACEHOLDER) -> None:
        self._host = host
        self._placeholder = placeholder
        self._folds: list[FoldRange] = []

    @property
    def host(self) -> FoldHost:
        return self._host

    @property
    def placeholder(self) -> str:
        return self._placeholder

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def create_fold(self, start: int, end: int) -> FoldRange:
        """Hide the text from ``start`` to ``end`` behind the placeholder glyph.

        Raises :class:`~foldkit.core.ranges.InvalidRangeError` for reversed or
        out-of-bounds spans before anything is registered or drawn. Zero-length
        spans are accepted; they hide nothing but still capture input.
        """

        span = TextRange(start, end).validate(len(self._host))
        fold = FoldRange(start=span.start, end=span.end)
        fold.artifact = self._host.hide_span(
            fold.start, fold.end, self._placeholder, self._unfold_bindings()
        )
        self._folds.append(fold)
        self._host.clear_selection()
        LOGGER.debug("Folded span %s-%s", fold.start, fold.end)
        return fold

    def fold_occurrences(self, literal: str) -> list[FoldRange]:
        """Fold every non-overlapping occurrence of ``literal``, earliest first."""

        text = self._host.read_region(0, len(self._host))
        folds = [self.create_fold(match.start, match.end) for match in find_all_occurrences(text, literal)]
        LOGGER.debug("Folded %d occurrence(s) of %r", len(folds), literal)
        return folds

    def _unfold_bindings(self) -> dict[str, Callable[[int], Any]]:
        # Handlers receive the caret position, so a key on a glyph unfolds
        # exactly what unfold-at-point would at the same caret.
        def _unfold_here(position: int) -> None:
            self.unfold_at(position)

        return {CONFIRM_ACTION: _unfold_here, CANCEL_ACTION: _unfold_here}

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------
    def destroy(self, fold: FoldRange, *, reveal: bool = True) -> bool:
        """Destroy ``fold``; returns ``False`` when it was already dead."""

        if not fold.live:
            return False
        fold.live = False
        try:
            self._folds.remove(fold)
        except ValueError:
            return False
        if reveal and fold.artifact is not None:
            self._host.reveal_span(fold.artifact)
        LOGGER.debug("Unfolded span %s-%s", fold.start, fold.end)
        return True

    def unfold_all(self) -> int:
        """Destroy every live fold and return how many were removed."""

        removed = 0
        for fold in list(self._folds):
            if self.destroy(fold):
                removed += 1
        return removed

    def unfold_at(self, position: int) -> list[FoldRange]:
        """Destroy every fold covering ``position``, boundaries included."""

        removed = [fold for fold in self.ranges_at(position) if self.destroy(fold)]
        return removed

    def on_edit(self, edit_start: int, edit_end: int, delta: int = 0) -> None:
        """Handle a pre-edit notification for ``[edit_start, edit_end]``.

        Folds touching the edit, edge contact included, are destroyed. Folds
        located after the edit shift by ``delta`` to track the text they hide.
        """

        for fold in list(self._folds):
            if fold.intersects(edit_start, edit_end):
                self.destroy(fold)
            elif fold.start > edit_end and delta:
                fold.start += delta
                fold.end += delta

    def detach(self) -> list[FoldRange]:
        """Drop every fold without revealing it (the document is going away)."""

        dropped = list(self._folds)
        for fold in dropped:
            self.destroy(fold, reveal=False)
        return dropped

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def ranges(self) -> tuple[FoldRange, ...]:
        return tuple(self._folds)

    def ranges_at(self, position: int) -> list[FoldRange]:
        return [fold for fold in self._folds if fold.covers(position)]

    def snapshot(self) -> list[tuple[int, int]]:
        """Return the live folds as boundary pairs in document order."""

        return sorted(fold.as_tuple() for fold in self._folds)

    def __len__(self) -> int:
        return len(self._folds)

    def __iter__(self) -> Iterator[FoldRange]:
        return iter(tuple(self._folds))

    def __contains__(self, fold: object) -> bool:
        return any(candidate is fold for candidate in self._folds)
