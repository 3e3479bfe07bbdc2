"""Literal occurrence scanning used by the multi-fold command."""

from __future__ import annotations

from typing import Iterator

from ..core.ranges import TextRange

__all__ = ["find_all_occurrences"]


def find_all_occurrences(text: str, literal: str) -> Iterator[TextRange]:
    """Yield every non-overlapping match of ``literal`` in ``text``.

    Matching is literal (no pattern syntax) and proceeds left to right, each
    search resuming at the end of the previous match. An empty ``literal``
    yields nothing.
    """

    if not literal:
        return
    width = len(literal)
    cursor = 0
    while True:
        index = text.find(literal, cursor)
        if index < 0:
            return
        yield TextRange(index, index + width)
        cursor = index + width
